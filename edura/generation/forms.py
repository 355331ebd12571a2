from flask_wtf import FlaskForm
from wtforms import FloatField, IntegerField, SelectField, StringField, TextAreaField
from wtforms.validators import DataRequired, InputRequired, Length, NumberRange, Optional

from ..services.requests import DURATION_UNITS, SKILL_LEVELS

LEVEL_CHOICES = [(level, level.title()) for level in SKILL_LEVELS]
UNIT_CHOICES = [(unit, unit.title()) for unit in DURATION_UNITS]


class ContentForm(FlaskForm):
    content = TextAreaField("Study material", validators=[InputRequired(), Length(max=50000)])
    count = IntegerField("Number of items", default=10, validators=[Optional(), NumberRange(min=1, max=50)])


class SummaryForm(FlaskForm):
    content = TextAreaField("Study material", validators=[InputRequired(), Length(max=50000)])


class RoadmapGoalForm(FlaskForm):
    goal = TextAreaField("Learning goal", validators=[InputRequired(), Length(max=2000)])


class DetailedRoadmapForm(FlaskForm):
    topic = StringField("Topic or skill", validators=[InputRequired(), Length(max=255)])
    skill_level = SelectField("Current skill level", choices=LEVEL_CHOICES, default="beginner")
    duration = IntegerField("Timeline", validators=[InputRequired(), NumberRange(min=1, max=365)])
    duration_unit = SelectField("Timeline unit", choices=UNIT_CHOICES, default="weeks")
    hours_per_day = FloatField("Hours per day", validators=[Optional(), NumberRange(min=0.25, max=24)])
    hours_per_week = FloatField("Hours per week", validators=[Optional(), NumberRange(min=1, max=168)])


class CourseRequestForm(FlaskForm):
    topic = StringField("Topic", validators=[DataRequired(), Length(max=255)])
    goal = TextAreaField("Learning goal", validators=[DataRequired(), Length(max=2000)])
    audience = StringField(
        "Audience",
        default="Motivated learners eager to level up",
        validators=[DataRequired(), Length(max=255)],
    )
    level = SelectField("Level", choices=LEVEL_CHOICES, default="beginner")
    duration_weeks = IntegerField("Duration (weeks)", default=4, validators=[Optional(), NumberRange(min=1, max=52)])
    preferred_language = StringField("Preferred language", default="English", validators=[Length(max=50)])
    focus_area = StringField(
        "Focus area",
        default="Hands-on, project-based learning",
        validators=[DataRequired(), Length(max=255)],
    )
    category = StringField("Category", validators=[Optional(), Length(max=50)])
