import logging
import time

from authlib.jose import jwt, JoseError
from flask import current_app

from app import db

logger = logging.getLogger(__name__)

JWT_HEADER = {'alg': 'HS256'}


def issue_token(user):
    """
    Maak een ondertekend bearer-token (HS256) voor een gebruiker.

    Returns:
        str: JWT met sub, role, iat en exp.
    """
    now = int(time.time())
    claims = {
        'sub': str(user.id),
        'role': user.role,
        'iat': now,
        'exp': now + current_app.config['JWT_EXPIRES_SECONDS'],
    }
    token = jwt.encode(JWT_HEADER, claims, current_app.config['SECRET_KEY'])
    return token.decode('utf-8')


def decode_token(token):
    #    Verifieer handtekening en vervaldatum; None bij een ongeldig token.
    try:
        claims = jwt.decode(token, current_app.config['SECRET_KEY'])
        claims.validate()
    except JoseError as e:
        logger.debug(f"Token geweigerd: {str(e)}")
        return None
    return claims


def user_from_authorization(header):
    from app.models import User
    if not header or not header.lower().startswith('bearer '):
        return None
    claims = decode_token(header[7:].strip())
    if claims is None:
        return None
    try:
        user_id = int(claims['sub'])
    except (KeyError, TypeError, ValueError):
        logger.debug("Token zonder geldige sub-claim")
        return None
    user = db.session.get(User, user_id)
    if not user:
        logger.debug(f"Geen gebruiker gevonden voor token sub={user_id}")
    return user
