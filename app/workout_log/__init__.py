from flask import Blueprint
import logging

logger = logging.getLogger(__name__)

logger.debug("Initialiseren van workout_log blueprint")
bp = Blueprint('workout_log', __name__)

from . import routes
