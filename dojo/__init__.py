from flask import Flask, jsonify
from flask_sqlalchemy import SQLAlchemy
from flask_bcrypt import Bcrypt
from flask_login import LoginManager
from dojo.config import Config
from flask_migrate import Migrate


db = SQLAlchemy()
migrate = Migrate()
bcrypt = Bcrypt()
login_manager = LoginManager()


@login_manager.unauthorized_handler
def unauthorized():
    return jsonify({"error": "Unauthorized"}), 401


def create_app(config_class=Config):
    app = Flask(__name__)
    app.config.from_object(config_class)

    db.init_app(app)
    bcrypt.init_app(app)
    login_manager.init_app(app)
    migrate.init_app(app, db)

    from dojo.main.routes import main
    from dojo.learn import learn
    from dojo.skills import skills
    from dojo.book import book
    from dojo.commands import register_commands

    app.register_blueprint(main)
    app.register_blueprint(learn)
    app.register_blueprint(skills)
    app.register_blueprint(book, url_prefix='/book')
    register_commands(app)

    return app
