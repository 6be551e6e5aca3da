import logging as logger
import pytz
from flask_wtf import FlaskForm
from werkzeug.datastructures import MultiDict
from wtforms import Field, StringField, IntegerField, FloatField, PasswordField, ValidationError
from wtforms.fields.simple import TextAreaField
from wtforms.validators import AnyOf, DataRequired, InputRequired, Length, NumberRange, Optional
from wtforms.widgets import TextInput

from app.models import Technique
from app.utils import parse_datetime


def json_formdata(payload):
    """
    Zet een JSON-body om naar formdata voor WTForms.
    Notities:
        - None-waarden worden weggelaten zodat Optional-validators ze als 'niet ingevuld' zien.
        - Lijsten worden meerdere waarden onder dezelfde sleutel (MultiDict-gedrag).
        - Waarden worden tekst, zoals bij een gepost formulier; 0 telt dan als ingevuld.
    """
    if not isinstance(payload, dict):
        payload = {}
    formdata = MultiDict()
    for key, value in payload.items():
        values = value if isinstance(value, list) else [value]
        for item in values:
            if item is not None:
                formdata.add(key, str(item))
    return formdata


def first_error(form):
    #    Geef de eerste validatiefout terug als leesbare melding.
    for field_name, errors in form.errors.items():
        if not errors:
            continue
        if field_name is None:
            return errors[0]
        return f"{form[field_name].label.text}: {errors[0]}"
    return None


class AliasListField(Field):
    """
    Veld voor een lijst aliassen.
    Notities:
        - Accepteert een JSON-lijst of een komma-gescheiden string.
        - Lege items worden weggelaten; ontdubbelen gebeurt in de catalogus-service.
    """
    widget = TextInput()

    def _value(self):
        return ', '.join(self.data or [])

    def process_formdata(self, valuelist):
        aliases = []
        for value in valuelist:
            for alias in str(value).split(','):
                alias = alias.strip()
                if alias:
                    aliases.append(alias)
        self.data = aliases


class IsoDateTimeField(Field):
    """
    Veld voor ISO-8601 tijdstippen op de API-grens.
    Notities:
        - Waarden zonder offset worden als UTC gelezen.
    """
    widget = TextInput()

    def _value(self):
        return self.data.isoformat() if self.data else ''

    def process_formdata(self, valuelist):
        if not valuelist:
            return
        parsed = parse_datetime(valuelist[0], pytz.UTC)
        if parsed is None:
            self.data = None
            raise ValueError('Fecha y hora no válidas.')
        self.data = parsed


class RegisterForm(FlaskForm):
    """
    Formulier voor het registreren van een gebruiker.
    Notities:
        - Valideert unieke gebruikersnaam in de database.
    """
    username = StringField('Usuario', validators=[DataRequired(message='El usuario es obligatorio.'),
                                                  Length(min=3, max=64)])
    password = PasswordField('Contraseña', validators=[DataRequired(message='La contraseña es obligatoria.'),
                                                       Length(min=6, max=128)])

    class Meta:
        csrf = False  # JSON-API met bearer-tokens

    def validate_username(self, username):
        """
        Valideer dat de gebruikersnaam nog niet in gebruik is.
        Raises:
            ValidationError: Als de naam al bestaat.
        """
        from app.models import User
        if User.query.filter_by(username=username.data.strip()).first() is not None:
            raise ValidationError('El nombre de usuario ya está en uso.')


class LoginForm(FlaskForm):
    username = StringField('Usuario', validators=[DataRequired(message='El usuario es obligatorio.')])
    password = PasswordField('Contraseña', validators=[DataRequired(message='La contraseña es obligatoria.')])

    class Meta:
        csrf = False


class SearchExerciseForm(FlaskForm):
    """
    Formulier voor het zoeken van oefeningen (querystring).
    Notities:
        - q matcht hoofdletterongevoelig op naam of alias.
    """
    q = StringField('Buscar', validators=[Optional(), Length(max=100)])

    class Meta:
        csrf = False


class ExerciseForm(FlaskForm):
    """
    Formulier voor het aanmaken of bewerken van een oefening in de catalogus.
    Notities:
        - Alleen beheerders gebruiken dit formulier (zie app.catalog.routes).
        - Bij bewerken worden ontbrekende velden niet aangepast.
    """
    name = StringField('Nombre', validators=[DataRequired(message='El nombre del ejercicio es obligatorio.'),
                                             Length(max=100)])
    description = TextAreaField('Descripción', validators=[Optional()])
    video_path = StringField('Vídeo', validators=[Optional(), Length(max=255)])
    aliases = AliasListField('Alias', default=list)

    class Meta:
        csrf = False

    def validate_aliases(self, field):
        for alias in field.data or []:
            if len(alias) > 100:
                raise ValidationError(f'El alias "{alias[:20]}..." supera los 100 caracteres.')


class RoutineForm(FlaskForm):
    name = StringField('Nombre', validators=[DataRequired(message='El nombre de la rutina es obligatorio.'),
                                             Length(max=100)])
    description = TextAreaField('Descripción', validators=[Optional()])

    class Meta:
        csrf = False


class RoutineExerciseForm(FlaskForm):
    """
    Subformulier voor een voorgeschreven oefening binnen een routine.
    Notities:
        - Wordt per item van de 'exercises'-lijst opgebouwd, zie app.routines.service.
        - Rep-range grenzen zijn optioneel; als beide ingevuld zijn moet min <= max.
    """
    exercise_id = IntegerField('Ejercicio', validators=[InputRequired(message='Selecciona un ejercicio.')])
    sets = IntegerField('Series', validators=[InputRequired(message='Define la cantidad de series.'),
                                              NumberRange(min=1, message='Debe haber al menos 1 serie.')])
    rep_range_min = IntegerField('Repeticiones mínimas', validators=[Optional(), NumberRange(min=1)])
    rep_range_max = IntegerField('Repeticiones máximas', validators=[Optional(), NumberRange(min=1)])
    technique = StringField('Técnica', default=Technique.NORMAL.value,
                            validators=[AnyOf(Technique.values(), message='Técnica no válida.')])
    rest_time = IntegerField('Descanso', validators=[Optional(), NumberRange(min=0)])
    order_in_routine = IntegerField('Orden', validators=[Optional(), NumberRange(min=1)])

    class Meta:
        csrf = False  # Subformulier binnen RoutineForm

    def validate_rep_range_max(self, field):
        if field.data is not None and self.rep_range_min.data is not None \
                and self.rep_range_min.data > field.data:
            raise ValidationError('El rango de repeticiones no es válido.')


class WorkoutForm(FlaskForm):
    """
    Formulier voor de payload van POST /api/workouts.
    Notities:
        - Sets worden per item gevalideerd met WorkoutSetEntryForm.
        - Tijdstippen moeten een offset dragen; zonder offset geldt UTC.
    """
    routine_id = IntegerField('Rutina', validators=[InputRequired(message='Falta la rutina.')])
    routine_name = StringField('Nombre de la rutina', validators=[DataRequired(message='Falta el nombre de la rutina.'),
                                                                  Length(max=100)])
    started_at = IsoDateTimeField('Inicio', validators=[InputRequired(message='Falta la fecha de inicio.')])
    completed_at = IsoDateTimeField('Fin', validators=[Optional()])
    duration = IntegerField('Duración', validators=[Optional(), NumberRange(min=1)])
    notes = TextAreaField('Notas', validators=[Optional()])

    class Meta:
        csrf = False


class WorkoutSetEntryForm(FlaskForm):
    exercise_id = IntegerField('Ejercicio', validators=[InputRequired(message='Falta el ejercicio.')])
    exercise_name = StringField('Nombre del ejercicio', validators=[DataRequired(message='Falta el nombre del ejercicio.'),
                                                                    Length(max=100)])
    set_number = IntegerField('Serie', validators=[InputRequired(), NumberRange(min=1)])
    weight = FloatField('Peso', validators=[Optional(), NumberRange(min=0, message='El peso no puede ser negativo.')])
    reps = IntegerField('Repeticiones', validators=[InputRequired(message='Faltan las repeticiones.'),
                                                    NumberRange(min=1, message='Cada serie debe tener al menos 1 repetición.')])
    technique = StringField('Técnica', default=Technique.NORMAL.value,
                            validators=[AnyOf(Technique.values(), message='Técnica no válida.')])
    rest_time = IntegerField('Descanso', validators=[Optional(), NumberRange(min=0)])

    class Meta:
        csrf = False


def validate_entries(form_class, entries, label):
    """
    Valideer een lijst JSON-objecten met een subformulier.

    Returns:
        tuple: (lijst gevalideerde formulieren, eerste foutmelding of None)
    """
    forms = []
    for index, entry in enumerate(entries):
        form = form_class(formdata=json_formdata(entry))
        if not form.validate():
            message = first_error(form)
            logger.debug(f"{label} {index + 1} ongeldig: {form.errors}")
            return forms, f"{label} {index + 1}: {message}"
        forms.append(form)
    return forms, None
