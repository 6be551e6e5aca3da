from flask import Blueprint
import logging

logger = logging.getLogger(__name__)

logger.debug("Initialiseren van catalog blueprint")
bp = Blueprint('catalog', __name__)

from . import routes
