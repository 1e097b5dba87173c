import enum
from dojo import db, login_manager
from flask_login import UserMixin


@login_manager.user_loader
def load_user(user_id):
    return db.session.get(User, int(user_id))


class ActivityType(str, enum.Enum):
    LEARN_QUIZ = 'LEARN_QUIZ'
    PRACTICE_DRILL = 'PRACTICE_DRILL'
    APPLY_CHALLENGE = 'APPLY_CHALLENGE'
    ASSESS_TEST = 'ASSESS_TEST'


class ProficiencyLevel(str, enum.Enum):
    """Listed lowest to highest; the order is the rank."""
    NOVICE = 'NOVICE'
    APPRENTICE = 'APPRENTICE'
    JOURNEYMAN = 'JOURNEYMAN'
    MASTER = 'MASTER'


activity_skill = db.Table(
    'activity_skill',
    db.Column('activity_id', db.Integer, db.ForeignKey('activity.id'), primary_key=True),
    db.Column('skill_id', db.Integer, db.ForeignKey('skill.id'), primary_key=True),
)


class User(db.Model, UserMixin):
    id = db.Column(db.Integer, primary_key=True)
    username = db.Column(db.String(40), unique=True, nullable=False)
    email = db.Column(db.String(120), unique=True, nullable=False)
    password = db.Column(db.String(60), nullable=False)
    is_admin = db.Column(db.Boolean, nullable=False, default=False)
    profile = db.relationship('UserProfile', backref='user', uselist=False, lazy=True)

    def __repr__(self):
        return f"User('{self.username}', '{self.email}')"


class Skill(db.Model):
    __tablename__ = 'skill'

    id          = db.Column(db.Integer, primary_key=True)
    name        = db.Column(db.String(120), unique=True, nullable=False)
    description = db.Column(db.Text, nullable=False, default='')
    category    = db.Column(db.String(120), nullable=False)

    def to_dict(self):
        return {
            'id':          self.id,
            'name':        self.name,
            'description': self.description,
            'category':    self.category,
        }

    def __repr__(self):
        return f"Skill('{self.name}', category='{self.category}')"


class Module(db.Model):
    __tablename__ = 'module'

    id          = db.Column(db.Integer, primary_key=True)
    title       = db.Column(db.String(200), nullable=False)
    description = db.Column(db.Text, nullable=False, default='')
    order       = db.Column(db.Integer, unique=True, nullable=False)
    activities  = db.relationship(
        'Activity', backref='module', lazy=True,
        order_by='Activity.order', cascade='all, delete-orphan'
    )

    def __repr__(self):
        return f"Module('{self.title}', order={self.order})"


class Activity(db.Model):
    """
    One step of a module. `content` is the JSON payload for `type`;
    read it through `payload` to get the typed variant.
    """
    __tablename__ = 'activity'

    id          = db.Column(db.Integer, primary_key=True)
    title       = db.Column(db.String(200), nullable=False)
    description = db.Column(db.Text, nullable=False, default='')
    type        = db.Column(db.Enum(ActivityType, name='activity_type'), nullable=False)
    module_id   = db.Column(db.Integer, db.ForeignKey('module.id'), nullable=False)
    order       = db.Column(db.Integer, nullable=False)
    xp_reward   = db.Column(db.Integer, nullable=False, default=0)
    content     = db.Column(db.JSON, nullable=False, default=dict)
    skills      = db.relationship(
        'Skill', secondary=activity_skill, lazy='subquery',
        backref=db.backref('activities', lazy=True),
    )

    __table_args__ = (
        db.UniqueConstraint('module_id', 'order', name='uq_module_order'),
    )

    @property
    def payload(self):
        from dojo.learn.content import parse_content
        return parse_content(self.type, self.content or {})

    def __repr__(self):
        return f"Activity('{self.title}', {self.type.value}, order={self.order})"


class UserProfile(db.Model):
    __tablename__ = 'user_profile'

    id                = db.Column(db.Integer, primary_key=True)
    user_id           = db.Column(db.Integer, db.ForeignKey('user.id'), unique=True, nullable=False)
    level             = db.Column(db.Integer, nullable=False, default=1)
    xp                = db.Column(db.Integer, nullable=False, default=0)
    current_module_id = db.Column(db.Integer, db.ForeignKey('module.id'), nullable=True)

    current_module = db.relationship('Module', lazy=True)
    proficiencies  = db.relationship(
        'UserSkillProficiency', backref='profile', lazy=True,
        order_by='UserSkillProficiency.id', cascade='all, delete-orphan'
    )
    activity_progress = db.relationship(
        'UserActivityProgress', backref='profile', lazy=True,
        cascade='all, delete-orphan'
    )

    def __repr__(self):
        return f"UserProfile(user={self.user_id}, level={self.level}, xp={self.xp})"


class UserSkillProficiency(db.Model):
    __tablename__ = 'user_skill_proficiency'

    id                = db.Column(db.Integer, primary_key=True)
    profile_id        = db.Column(db.Integer, db.ForeignKey('user_profile.id'), nullable=False)
    skill_id          = db.Column(db.Integer, db.ForeignKey('skill.id'), nullable=False)
    proficiency_level = db.Column(
        db.Enum(ProficiencyLevel, name='proficiency_level'),
        nullable=False,
        default=ProficiencyLevel.NOVICE,
    )

    skill = db.relationship('Skill', lazy='joined')

    __table_args__ = (
        db.UniqueConstraint('profile_id', 'skill_id', name='uq_profile_skill'),
    )

    def __repr__(self):
        return f"UserSkillProficiency(profile={self.profile_id}, skill={self.skill_id}, {self.proficiency_level.value})"


class UserActivityProgress(db.Model):
    """
    One row per profile x activity.
    attempts only grows; completed never flips back to False.
    """
    __tablename__ = 'user_activity_progress'

    id           = db.Column(db.Integer, primary_key=True)
    profile_id   = db.Column(db.Integer, db.ForeignKey('user_profile.id'), nullable=False)
    activity_id  = db.Column(db.Integer, db.ForeignKey('activity.id'), nullable=False)
    completed    = db.Column(db.Boolean, nullable=False, default=False)
    score        = db.Column(db.Integer, nullable=False, default=0)
    attempts     = db.Column(db.Integer, nullable=False, default=0)
    last_attempt = db.Column(db.DateTime(timezone=True), nullable=True)

    activity = db.relationship('Activity', lazy=True)

    __table_args__ = (
        db.UniqueConstraint('profile_id', 'activity_id', name='uq_profile_activity'),
    )

    def to_dict(self):
        return {
            'activityId':  self.activity_id,
            'completed':   self.completed,
            'score':       self.score,
            'attempts':    self.attempts,
            'lastAttempt': self.last_attempt.isoformat() if self.last_attempt else None,
        }

    def __repr__(self):
        return f"UserActivityProgress(profile={self.profile_id}, activity={self.activity_id}, done={self.completed})"