"""
dojo/commands.py
Flask CLI commands:  `flask seed-demo`  and  `flask import-book`.
"""
import click
from sqlalchemy.exc import SQLAlchemyError

from dojo import db, bcrypt
from dojo.models import (User, UserProfile, Skill, Module, Activity,
                         ActivityType, ProficiencyLevel, UserSkillProficiency)
from dojo.book.generator import import_book

# ── Demo data ─────────────────────────────────────────────────────────────────

DEMO_USERS = [
    # username, email, password, is_admin, level, xp
    ("demo",  "demo@example.com",  "password123", False, 1,  0),
    ("admin", "admin@example.com", "admin123",    True,  10, 1000),
]

DEMO_SKILLS = [
    ("pandas-io",             "Reading and writing data with pandas",              "Pandas"),
    ("pandas-filtering",      "Filtering and selecting data in pandas",            "Pandas"),
    ("pandas-transformation", "Transforming and cleaning data with pandas",        "Pandas"),
    ("pandas-groupby",        "Grouping and aggregating data with pandas",         "Pandas"),
    ("numpy-arrays",          "Creating and manipulating NumPy arrays",            "NumPy"),
    ("numpy-math",            "Mathematical operations with NumPy",                "NumPy"),
    ("matplotlib-basic",      "Creating basic plots with Matplotlib",              "Visualization"),
    ("matplotlib-advanced",   "Advanced plotting techniques with Matplotlib",      "Visualization"),
    ("sklearn-preprocessing", "Data preprocessing with scikit-learn",              "Machine Learning"),
    ("sklearn-models",        "Building and training ML models with scikit-learn", "Machine Learning"),
    ("sklearn-evaluation",    "Evaluating ML models with scikit-learn",            "Machine Learning"),
]

DEMO_MODULES = [
    (1, "Introduction to Data Analysis with Python",
     "Learn the fundamentals of data analysis with Python, including basic data structures and libraries."),
    (2, "Data Manipulation with Pandas",
     "Master data manipulation techniques using the pandas library."),
    (3, "Data Visualization",
     "Create insightful visualizations using Matplotlib and other libraries."),
    (4, "Introduction to Machine Learning",
     "Learn the basics of machine learning with scikit-learn."),
]

_SAMPLE = """import numpy as np

data = np.array([[5.1, 3.5, 1.4, 0.2],
                 [4.9, 3.0, 1.4, 0.2],
                 [6.2, 3.4, 5.4, 2.3],
                 [5.9, 3.0, 5.1, 1.8]])
"""

MODULE_ONE_ACTIVITIES = [
    {
        "order": 1,
        "title": "Python Data Structures Quiz",
        "description": "Test your knowledge of Python data structures.",
        "type": ActivityType.LEARN_QUIZ,
        "xp_reward": 50,
        "skills": ["numpy-arrays"],
        "content": {
            "questions": [
                {"id": "1", "text": "Which of the following is a mutable data structure in Python?",
                 "options": [{"id": "a", "text": "Tuple"}, {"id": "b", "text": "String"},
                             {"id": "c", "text": "List"}, {"id": "d", "text": "Frozen Set"}]},
                {"id": "2", "text": "What is the primary difference between a list and a tuple in Python?",
                 "options": [{"id": "a", "text": "Lists can contain multiple data types, tuples cannot"},
                             {"id": "b", "text": "Tuples are immutable, lists are mutable"},
                             {"id": "c", "text": "Lists are ordered, tuples are unordered"},
                             {"id": "d", "text": "Tuples can be nested, lists cannot"}]},
            ],
            "correct_answers": {"1": "c", "2": "b"},
        },
    },
    {
        "order": 2,
        "title": "Creating NumPy Arrays",
        "description": "Practice creating and manipulating NumPy arrays.",
        "type": ActivityType.PRACTICE_DRILL,
        "xp_reward": 100,
        "skills": ["numpy-arrays"],
        "content": {
            "instructions": (
                "Complete `create_array` so that it builds a 1D NumPy array from the "
                "input list, reshapes it into 2 rows and returns it."
            ),
            "initial_code": (
                "import numpy as np\n\n"
                "def create_array(input_list):\n"
                "    # YOUR CODE HERE\n"
                "    pass\n\n"
                "test_array = create_array([1, 2, 3, 4, 5, 6])\n"
                "print(test_array.shape)\n"
            ),
            "solution": (
                "import numpy as np\n\n"
                "def create_array(input_list):\n"
                "    return np.array(input_list).reshape(2, -1)\n\n"
                "test_array = create_array([1, 2, 3, 4, 5, 6])\n"
                "print(test_array.shape)\n"
            ),
            "test_cases": [
                {"input": "", "expected_output": "(2, 3)", "description": "Array has two rows"},
            ],
        },
    },
    {
        "order": 3,
        "title": "Data Analysis with NumPy",
        "description": "Apply NumPy to analyze a dataset.",
        "type": ActivityType.APPLY_CHALLENGE,
        "xp_reward": 200,
        "skills": ["numpy-arrays", "numpy-math"],
        "content": {
            "instructions": "Explore a small slice of the iris measurements with NumPy.",
            "steps": [
                {"id": "1", "title": "Load and Explore Data",
                 "instructions": "Print the shape of the data.",
                 "initial_code": _SAMPLE + "\n# YOUR CODE HERE\n"},
                {"id": "2", "title": "Analyze the Data",
                 "instructions": "Print the mean of each column and the overall min and max.",
                 "initial_code": _SAMPLE + "\n# YOUR CODE HERE\n"},
            ],
            "initial_code": _SAMPLE + "\n# YOUR CODE HERE\n",
            "solution": (
                _SAMPLE +
                "\nprint('Shape:', data.shape)\n"
                "print('Means:', data.mean(axis=0))\n"
                "print('Min:', data.min(), 'Max:', data.max())\n"
            ),
            "expected_outputs": ["Shape: (4, 4)", "Min: 0.2 Max: 6.2"],
        },
    },
    {
        "order": 4,
        "title": "NumPy Fundamentals Assessment",
        "description": "Demonstrate your mastery of NumPy fundamentals.",
        "type": ActivityType.ASSESS_TEST,
        "xp_reward": 300,
        "skills": ["numpy-arrays", "numpy-math"],
        "content": {
            "instructions": (
                "Create a 3x3 identity matrix and print its trace, then create 10 evenly "
                "spaced values between 0 and 1 and print how many there are."
            ),
            "initial_code": "import numpy as np\n\n# YOUR CODE HERE\n",
            "solution": (
                "import numpy as np\n\n"
                "eye = np.eye(3)\n"
                "print('Trace:', int(eye.trace()))\n"
                "values = np.linspace(0, 1, 10)\n"
                "print('Count:', values.size)\n"
            ),
            "test_cases": [
                {"input": "", "expected_output": "Trace: 3", "description": "Identity matrix"},
                {"input": "", "expected_output": "Count: 10", "description": "Evenly spaced values"},
            ],
            "assessment_criteria": ["Correctness", "Use of NumPy"],
        },
    },
]

DEMO_PROFICIENCIES = [
    ("numpy-arrays", ProficiencyLevel.APPRENTICE),
    ("numpy-math",   ProficiencyLevel.NOVICE),
]


def seed_demo():
    """Insert demo users, skills, modules and module-one activities. Safe to re-run."""
    profiles = {}
    for username, email, password, is_admin, level, xp in DEMO_USERS:
        user = User.query.filter_by(email=email).first()
        if not user:
            hashed = bcrypt.generate_password_hash(password).decode('utf-8')
            user = User(username=username, email=email, password=hashed, is_admin=is_admin)
            db.session.add(user)
            db.session.flush()
        if not user.profile:
            user.profile = UserProfile(level=level, xp=xp)
            db.session.flush()
        profiles[username] = user.profile

    skills = {}
    for name, description, category in DEMO_SKILLS:
        skill = Skill.query.filter_by(name=name).first()
        if not skill:
            skill = Skill(name=name, description=description, category=category)
            db.session.add(skill)
        skills[name] = skill

    modules = {}
    for order, title, description in DEMO_MODULES:
        module = Module.query.filter_by(order=order).first()
        if not module:
            module = Module(title=title, description=description, order=order)
            db.session.add(module)
        modules[order] = module
    db.session.flush()

    first = modules[1]
    for item in MODULE_ONE_ACTIVITIES:
        activity = Activity.query.filter_by(module_id=first.id, order=item["order"]).first()
        if activity:
            continue
        db.session.add(Activity(
            module_id=first.id,
            order=item["order"],
            title=item["title"],
            description=item["description"],
            type=item["type"],
            xp_reward=item["xp_reward"],
            content=item["content"],
            skills=[skills[name] for name in item["skills"]],
        ))

    demo = profiles["demo"]
    demo.current_module_id = first.id
    for name, level in DEMO_PROFICIENCIES:
        exists = UserSkillProficiency.query.filter_by(
            profile_id=demo.id, skill_id=skills[name].id
        ).first()
        if not exists:
            db.session.add(UserSkillProficiency(
                profile_id=demo.id, skill_id=skills[name].id, proficiency_level=level
            ))

    db.session.commit()


def register_commands(app):

    @app.cli.command("seed-demo")
    def seed_demo_command():
        """Create demo users and starter content."""
        try:
            seed_demo()
        except SQLAlchemyError as e:
            db.session.rollback()
            app.logger.error("Seeding failed: %s", e)
            raise click.ClickException("Seeding failed") from e
        click.echo("Seeded demo users, skills and modules.")

    @app.cli.command("import-book")
    def import_book_command():
        """Generate modules from the book outline and save them."""
        try:
            counts = import_book()
        except SQLAlchemyError as e:
            app.logger.error("Book import failed: %s", e)
            raise click.ClickException("Book import failed") from e
        click.echo(
            f"Imported {counts['modules']} modules, {counts['skills']} skills "
            f"and {counts['activities']} activities."
        )
