import os

from dojo import create_app, db
from flask_migrate import upgrade, init, migrate
from sqlalchemy import inspect

app = create_app()


def setup_database():
    """Initialize and run migrations if needed"""
    with app.app_context():
        tables = inspect(db.engine).get_table_names()
        app.logger.info("Found tables: %s", tables)

        if not tables:
            app.logger.info("Database empty - setting up from scratch...")
            try:
                if not os.path.exists('migrations'):
                    init()
                migrate(message="Initial migration")
                upgrade()
                app.logger.info("Tables now: %s", inspect(db.engine).get_table_names())
            except Exception as e:
                # Keep serving; the app reports storage errors per request.
                app.logger.error("Setup error: %s", e)
        else:
            try:
                upgrade()
            except Exception as e:
                app.logger.error("Migration error: %s", e)


# Run database setup on startup
if os.environ.get('RENDER') or os.environ.get('DATABASE_URL'):
    setup_database()

if __name__ == '__main__':
    app.run(debug=True)
