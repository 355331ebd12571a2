from flask_wtf import FlaskForm
from wtforms import IntegerField
from wtforms.validators import NumberRange


class QuizScoreForm(FlaskForm):
    module_number = IntegerField("Module", validators=[NumberRange(min=1)])
    score = IntegerField("Correct answers", validators=[NumberRange(min=0)])
    total_questions = IntegerField("Questions", validators=[NumberRange(min=1)])
