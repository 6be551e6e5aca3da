import logging

from app.exceptions import ServiceError
from app.workout_log.validation import build_workout_payload

logger = logging.getLogger(__name__)

GENERIC_SUBMISSION_ERROR = 'No se pudo guardar el entrenamiento.'


class WorkoutSubmissionError(Exception):
    """
    De trainingsservice heeft het indienen geweigerd.
    Notities:
        - message is de melding van de service, of de algemene melding als die ontbreekt.
        - Het formulier in de sessie blijft ongewijzigd zodat opnieuw indienen kan.
    """

    def __init__(self, message=None, status_code=500):
        self.message = message or GENERIC_SUBMISSION_ERROR
        self.status_code = status_code
        super().__init__(self.message)


def submit_workout_log(form, identity, tz, create_workout=None):
    """
    Valideer het trainingslog en maak precies één training aan.

    Args:
        create_workout: Aanroepbare (identity, payload) -> Workout; standaard de trainingsservice.
    Raises:
        WorkoutValidationError: Als het formulier niet klopt; de service wordt dan niet aangeroepen.
        WorkoutSubmissionError: Als de service de training weigert.
    """
    payload = build_workout_payload(form, tz)
    if create_workout is None:
        from app.workouts.service import create_workout  # Import hier om circulaire imports te vermijden

    try:
        workout = create_workout(identity, payload)
    except ServiceError as e:
        logger.debug(f"Trainingslog geweigerd ({e.status_code}): {e.message}")
        raise WorkoutSubmissionError(e.message, e.status_code) from e

    logger.debug(f"Trainingslog ingediend: workout={workout.id}, sets={payload.total_sets}")
    return workout
