"""
dojo/book/generator.py
Builds learning modules from the book tree.

Per chapter:  one skill per concept, a learn + practice activity per concept,
an apply activity per section, and one assessment for the whole chapter.
"""
from __future__ import annotations

from typing import Any, Dict, List

from sqlalchemy.exc import SQLAlchemyError

from dojo import db
from dojo.models import Activity, ActivityType, Module, Skill
from dojo.book.structure import BOOK

XP_REWARDS = {
    ActivityType.LEARN_QUIZ:      50,
    ActivityType.PRACTICE_DRILL:  100,
    ActivityType.APPLY_CHALLENGE: 200,
    ActivityType.ASSESS_TEST:     300,
}

LIBRARIES = ["Pandas", "NumPy", "Matplotlib", "Scikit-learn"]


def _skill_id(concept: Dict) -> str:
    return f"skill-{concept['id']}"


def _activity(activity_id, title, description, kind, skill_ids, content, order) -> Dict[str, Any]:
    return {
        "id":          activity_id,
        "title":       title,
        "description": description,
        "type":        kind.value,
        "xp_reward":   XP_REWARDS[kind],
        "skill_ids":   skill_ids,
        "content":     content,
        "order":       order,
    }


def generate_module_from_chapter(chapter: Dict, level: int) -> Dict[str, Any]:
    skills: List[Dict] = []
    activities: List[Dict] = []
    order = 1

    for section in chapter["sections"]:
        for concept in section["concepts"]:
            skill = {
                "id":          _skill_id(concept),
                "name":        concept["name"],
                "description": concept["description"],
                "category":    section["title"],
            }
            skills.append(skill)

            activities.append(_activity(
                f"learn-{concept['id']}",
                f"Learn: {concept['name']}",
                f"Learn about {concept['name']} through interactive content.",
                ActivityType.LEARN_QUIZ,
                [skill["id"]],
                _learn_content(concept),
                order,
            ))
            order += 1

            activities.append(_activity(
                f"practice-{concept['id']}",
                f"Practice: {concept['name']}",
                f"Practice {concept['name']} with coding exercises.",
                ActivityType.PRACTICE_DRILL,
                [skill["id"]],
                _practice_content(concept),
                order,
            ))
            order += 1

    for section in chapter["sections"]:
        activities.append(_activity(
            f"apply-{section['id']}",
            f"Apply: {section['title']}",
            f"Apply your knowledge of {section['title']} in a mini-project.",
            ActivityType.APPLY_CHALLENGE,
            [_skill_id(c) for c in section["concepts"]],
            _apply_content(section),
            order,
        ))
        order += 1

    activities.append(_activity(
        f"assess-{chapter['id']}",
        f"Assessment: {chapter['title']}",
        f"Demonstrate your mastery of {chapter['title']}.",
        ActivityType.ASSESS_TEST,
        [s["id"] for s in skills],
        _assess_content(chapter),
        order,
    ))

    return {
        "id":          f"module-{chapter['id']}",
        "title":       chapter["title"],
        "description": chapter["description"],
        "level":       level,
        "order":       chapter["number"],
        "skills":      skills,
        "activities":  activities,
    }


def generate_all_modules() -> List[Dict[str, Any]]:
    return [generate_module_from_chapter(c, i) for i, c in enumerate(BOOK, start=1)]


def get_module_by_id(module_id: str) -> Dict | None:
    return next((m for m in generate_all_modules() if m["id"] == module_id), None)


def get_activity_by_id(activity_id: str) -> Dict | None:
    for module in generate_all_modules():
        for activity in module["activities"]:
            if activity["id"] == activity_id:
                return activity
    return None


def get_all_skills() -> List[Dict]:
    seen, skills = set(), []
    for module in generate_all_modules():
        for skill in module["skills"]:
            if skill["id"] not in seen:
                seen.add(skill["id"])
                skills.append(skill)
    return skills


def get_skill_by_id(skill_id: str) -> Dict | None:
    return next((s for s in get_all_skills() if s["id"] == skill_id), None)


# ── Learn content ─────────────────────────────────────────────────────────────

_OVERVIEWS = {
    "Definition": (
        "## Key Points\n\n"
        "* Data analysis is the process of examining, cleaning, transforming, and interpreting data to support decisions.\n"
        "* It combines qualitative and quantitative techniques to identify patterns and trends.\n"
        "* Modern data analysis relies heavily on computational tools and statistical methods.\n\n"
    ),
    "Process": (
        "## The Data Analysis Process\n\n"
        "1. **Data Collection**: gathering relevant data from various sources\n"
        "2. **Data Cleaning**: handling missing values, duplicates and errors\n"
        "3. **Data Exploration**: understanding structure and patterns\n"
        "4. **Data Analysis**: applying statistical methods and models\n"
        "5. **Interpretation**: drawing conclusions and making recommendations\n\n"
    ),
    "Descriptive": (
        "## Descriptive Analysis\n\n"
        "* Summarizes the main features of a dataset\n"
        "* Uses mean, median, mode, standard deviation and percentiles\n"
        "* Answers \"What happened?\"\n\n"
    ),
    "Predictive": (
        "## Predictive Analysis\n\n"
        "* Uses historical data to forecast future outcomes\n"
        "* Employs statistical models and machine learning algorithms\n"
        "* Answers \"What might happen next?\"\n\n"
    ),
    "Python": (
        "## Python for Data Analysis\n\n"
        "* **Pandas**: data manipulation and analysis\n"
        "* **NumPy**: numerical computing and array operations\n"
        "* **Matplotlib**: data visualization\n"
        "* **Scikit-learn**: machine learning algorithms\n\n"
    ),
}

_GENERIC_OVERVIEW = (
    "## Key Concepts\n\n"
    "* Understanding the fundamental principles is essential for effective data analysis\n"
    "* Practical application requires both theoretical knowledge and technical skills\n\n"
)


def _overview_key(concept: Dict) -> str | None:
    return next((k for k in _OVERVIEWS if k in concept["name"]), None)


def _learn_instructions(concept: Dict) -> str:
    key = _overview_key(concept)
    body = _OVERVIEWS[key] if key else _GENERIC_OVERVIEW
    return (
        f"# {concept['name']}\n\n## Overview\n{concept['description']}\n\n{body}"
        f"In this activity, you'll learn about {concept['name']} and its importance in "
        f"data analysis. Read through the material above and answer the quiz questions."
    )


_QUESTION_BANK = {
    "Definition": [
        ("What is data analysis?",
         ["The process of inspecting, cleaning, transforming, and modeling data to discover useful information",
          "The process of collecting large amounts of data from various sources",
          "The process of creating visual representations of data",
          "The process of storing and retrieving data efficiently"], 0,
         "Data analysis examines data to extract insights and support decisions."),
        ("Which of the following is NOT typically part of data analysis?",
         ["Hardware maintenance and network configuration",
          "Data cleaning and preprocessing",
          "Statistical modeling and hypothesis testing",
          "Data visualization and interpretation"], 0,
         "Hardware maintenance is an IT operations task, not analysis."),
    ],
    "Process": [
        ("What is typically the first step in the data analysis process?",
         ["Defining the question or problem", "Data visualization",
          "Statistical modeling", "Presenting results"], 0,
         "A clear question determines what data is needed."),
        ("What is the purpose of exploratory data analysis (EDA)?",
         ["To understand the structure, patterns, and relationships in the data",
          "To create final reports and presentations",
          "To implement the findings in production systems",
          "To collect additional data from new sources"], 0,
         "EDA builds understanding before heavier methods are applied."),
    ],
    "Descriptive": [
        ("What type of question does descriptive analysis answer?",
         ['"What happened?"', '"Why did it happen?"',
          '"What will happen next?"', '"What should we do about it?"'], 0,
         "Descriptive analysis summarizes historical or current data."),
        ("Which visualization best shows the distribution of a continuous variable?",
         ["Histogram", "Pie chart", "Network diagram", "Treemap"], 0,
         "Histograms bin a continuous range and show frequencies."),
    ],
    "Predictive": [
        ("What is the main goal of predictive analysis?",
         ["To forecast future outcomes based on historical data",
          "To describe what happened in the past",
          "To explain why something happened",
          "To recommend optimal actions"], 0,
         "Predictive analysis uses models to forecast future events."),
        ("In predictive modeling, what is overfitting?",
         ["When a model performs well on training data but poorly on new data",
          "When a model is too simple to capture the underlying patterns",
          "When the dataset is too small for analysis",
          "When the prediction horizon is too far in the future"], 0,
         "An overfit model has learned the noise in its training data."),
    ],
    "Python": [
        ("Which Python library is primarily used for data manipulation and analysis?",
         ["Pandas", "Matplotlib", "Scikit-learn", "TensorFlow"], 0,
         "Pandas provides DataFrames and Series for structured data."),
        ("What is the primary purpose of NumPy in data analysis?",
         ["Efficient numerical computations with arrays and matrices",
          "Creating interactive visualizations",
          "Building machine learning models",
          "Web scraping and data collection"], 0,
         "NumPy provides fast multi-dimensional arrays."),
    ],
}


def _library_index(concept: Dict) -> int:
    name = concept["name"].lower()
    if any(w in name for w in ("dataframe", "series", "pandas", "data manipulation")):
        return 0
    if any(w in name for w in ("array", "numpy", "numerical", "computation")):
        return 1
    if any(w in name for w in ("visual", "plot", "chart", "matplotlib")):
        return 2
    if any(w in name for w in ("machine learning", "model", "predict")):
        return 3
    return 0


def _quiz_questions(concept: Dict) -> List[tuple]:
    key = _overview_key(concept)
    if key:
        return _QUESTION_BANK[key]

    name = concept["name"]
    return [
        (f"What is the primary purpose of {name}?",
         ["To analyze data and extract insights", "To visualize data in charts and graphs",
          "To clean and preprocess data", "To store data efficiently"], 0,
         f"{name} is primarily used to analyze data and extract meaningful insights."),
        (f"Which Python library is commonly used for {name.lower()}?",
         list(LIBRARIES), _library_index(concept),
         "The right library depends on the concept and how it is applied."),
        (f"Which of the following best describes a challenge when working with {name.lower()}?",
         ["Ensuring data quality and consistency", "Limited computational resources",
          "Lack of standardized approaches", "Difficulty in interpreting results"], 0,
         f"Data quality and consistency are fundamental challenges, including for {name}."),
    ]


def _learn_content(concept: Dict) -> Dict[str, Any]:
    labels = "abcd"
    questions, answers = [], {}
    for i, (text, options, correct, explanation) in enumerate(_quiz_questions(concept), start=1):
        qid = str(i)
        questions.append({
            "id":          qid,
            "text":        text,
            "options":     [{"id": labels[j], "text": o} for j, o in enumerate(options)],
            "explanation": explanation,
        })
        answers[qid] = labels[correct]
    return {
        "instructions":    _learn_instructions(concept),
        "questions":       questions,
        "correct_answers": answers,
    }


# ── Practice content ──────────────────────────────────────────────────────────

_PANDAS_SETUP = """import pandas as pd

data = {'Name': ['John', 'Anna', 'Peter', 'Linda'],
        'Age': [28, 34, 29, 42],
        'Salary': [65000, 78000, 59000, 92000]}
df = pd.DataFrame(data)
"""

_NUMPY_SETUP = """import numpy as np

array1 = np.array([1, 2, 3, 4, 5])
array2 = np.array([6, 7, 8, 9, 10])
"""

_PRACTICE_CODE = {
    "pandas": (
        _PANDAS_SETUP + "\n# Task: print the rows with Age > 30, then the average salary\n",
        _PANDAS_SETUP + "\nprint(df[df['Age'] > 30])\nprint('Average Salary:', df['Salary'].mean())\n",
        [("Average Salary: 73500.0", "Average salary of the sample frame")],
    ),
    "numpy": (
        _NUMPY_SETUP + "\n# Task: print the element-wise sum and the dot product\n",
        _NUMPY_SETUP + "\nprint('Sum of arrays:', array1 + array2)\nprint('Dot product:', np.dot(array1, array2))\n",
        [("Dot product: 130", "Dot product of the sample arrays"),
         ("Sum of arrays: [ 7  9 11 13 15]", "Element-wise sum")],
    ),
    "matplotlib": (
        "import numpy as np\n\nx = np.linspace(0, 10, 100)\ny = np.sin(x)\n\n"
        "# Task: print how many points you would plot and the largest y value (2 dp)\n",
        "import numpy as np\n\nx = np.linspace(0, 10, 100)\ny = np.sin(x)\n\n"
        "print('Points:', len(x))\nprint(f'Max y: {y.max():.2f}')\n",
        [("Points: 100", "Number of plotted points"), ("Max y: 1.00", "Peak of the sine curve")],
    ),
    "generic": (
        "values = [3, 1, 4, 1, 5, 9, 2, 6]\n\n# Task: print the total and the largest value\n",
        "values = [3, 1, 4, 1, 5, 9, 2, 6]\n\nprint('Total:', sum(values))\nprint('Largest:', max(values))\n",
        [("Total: 31", "Sum of the values"), ("Largest: 9", "Maximum value")],
    ),
}


def _practice_kind(concept: Dict) -> str:
    tags = set(concept["tags"])
    name = concept["name"].lower()
    if "pandas" in tags or "dataframe" in name or "series" in name:
        return "pandas"
    if "numpy" in tags or "array" in name:
        return "numpy"
    if "matplotlib" in tags or "plot" in name or "visual" in name:
        return "matplotlib"
    return "generic"


def _practice_content(concept: Dict) -> Dict[str, Any]:
    initial, solution, checks = _PRACTICE_CODE[_practice_kind(concept)]
    return {
        "instructions": (
            f"# Practice: {concept['name']}\n\n## Overview\n{concept['description']}\n\n"
            f"## Instructions\nComplete the code below. The comments guide you through the exercise."
        ),
        "initial_code": f"# {concept['name']} exercise\n" + initial,
        "solution":     solution,
        "test_cases": [
            {"input": "", "expected_output": expected, "description": f"{desc} ({concept['name']})"}
            for expected, desc in checks
        ],
    }


# ── Apply / Assess content ────────────────────────────────────────────────────

_SECTION_DATA = """import numpy as np
import pandas as pd

np.random.seed(42)
df = pd.DataFrame({
    'id': range(1, 101),
    'value_a': np.random.normal(0, 1, 100),
    'value_b': np.random.normal(5, 2, 100),
    'category': np.random.choice(['A', 'B', 'C'], 100),
})
"""


def _apply_content(section: Dict) -> Dict[str, Any]:
    return {
        "instructions": (
            f"# Apply Your Knowledge: {section['title']}\n\n{section['description']}\n\n"
            f"Combine what you've learned about {section['title']} in a mini-project."
        ),
        "steps": [
            {"id": "1", "title": "Explore the dataset",
             "instructions": "Print the dataset shape.",
             "initial_code": _SECTION_DATA + "\n# Task: print the shape\n"},
            {"id": "2", "title": "Summarize by category",
             "instructions": "Group by category and print the mean of value_a and value_b.",
             "initial_code": "# Task: groupby category\n"},
        ],
        "initial_code": f"# {section['title']} - Mini Project\n" + _SECTION_DATA + "\n# Your code here:\n",
        "solution": (
            f"# {section['title']} - Mini Project (Solution)\n" + _SECTION_DATA +
            "\nprint('Dataset shape:', df.shape)\n"
            "print('Statistics by category:')\n"
            "print(df.groupby('category')[['value_a', 'value_b']].mean())\n"
        ),
        "expected_outputs": ["Dataset shape: (100, 4)", "Statistics by category"],
    }


def _assess_content(chapter: Dict) -> Dict[str, Any]:
    data = (
        "import numpy as np\n\n"
        "np.random.seed(42)\n"
        "X = np.random.rand(200) * 10\n"
        "y = 5 + 2 * X + np.random.randn(200)\n"
    )
    return {
        "instructions": (
            f"# Chapter Assessment: {chapter['title']}\n\n{chapter['description']}\n\n"
            "Fit a straight line to the data and report its slope and intercept."
        ),
        "initial_code": f"# {chapter['title']} - Assessment\n" + data + "\n# Your code here:\n",
        "solution": (
            f"# {chapter['title']} - Assessment (Solution)\n" + data +
            "\nslope, intercept = np.polyfit(X, y, 1)\n"
            "print(f'Slope: {round(slope)}')\n"
            "print(f'Intercept: {round(intercept)}')\n"
        ),
        "test_cases": [
            {"input": "", "expected_output": "Slope: 2", "description": "Recovered slope"},
            {"input": "", "expected_output": "Intercept: 5", "description": "Recovered intercept"},
        ],
        "assessment_criteria": ["Functionality", "Code Quality"],
    }


# ── Persistence ───────────────────────────────────────────────────────────────

def _import_skill(data: Dict) -> Skill:
    skill = Skill.query.filter_by(name=data["name"]).first()
    if not skill:
        skill = Skill(name=data["name"])
        db.session.add(skill)
    skill.description = data["description"]
    skill.category = data["category"]
    return skill


def _import_module(data: Dict) -> Module:
    module = Module.query.filter_by(title=data["title"]).first()
    if module:
        module.description = data["description"]
        return module

    order = data["order"]
    if Module.query.filter_by(order=order).first():
        top = db.session.query(db.func.max(Module.order)).scalar() or 0
        order = top + 1
    module = Module(title=data["title"], description=data["description"], order=order)
    db.session.add(module)
    db.session.flush()
    return module


def import_book() -> Dict[str, int]:
    """
    Write every generated module into the database. Re-running updates rows
    in place. Commits once; rolls back and re-raises on failure.
    """
    counts = {"modules": 0, "skills": 0, "activities": 0}
    try:
        for data in generate_all_modules():
            skills = {s["id"]: _import_skill(s) for s in data["skills"]}
            counts["skills"] += len(skills)

            module = _import_module(data)
            counts["modules"] += 1

            for a in data["activities"]:
                activity = Activity.query.filter_by(module_id=module.id, order=a["order"]).first()
                if not activity:
                    activity = Activity(module_id=module.id, order=a["order"])
                    db.session.add(activity)
                activity.title = a["title"]
                activity.description = a["description"]
                activity.type = ActivityType(a["type"])
                activity.xp_reward = a["xp_reward"]
                activity.content = a["content"]
                activity.skills = [skills[sid] for sid in a["skill_ids"]]
                counts["activities"] += 1

        db.session.commit()
    except SQLAlchemyError:
        db.session.rollback()
        raise
    return counts
