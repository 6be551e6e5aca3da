from flask import Blueprint
import logging

logger = logging.getLogger(__name__)

logger.debug("Initialiseren van routines blueprint")
bp = Blueprint('routines', __name__)

from . import routes
