import logging

from django.conf import settings
from django.contrib.auth import get_user_model
from django.db import DatabaseError, transaction
from django.utils.module_loading import import_string


logger = logging.getLogger(__name__)


def _split_name(name):
    parts = (name or '').split()
    if not parts:
        return '', ''
    return parts[0], ' '.join(parts[1:])


def create_auth_user(*, email, password, role, college_id=None, name=''):
    """
    Provision a login account.

    Returns ``{'success': True, 'user': user}`` or ``{'success': False, 'error': message}``.
    The email doubles as the username.
    """
    if not email or not password or not role:
        return {'success': False, 'error': 'Missing required fields: email, password, role'}

    user_model = get_user_model()
    email = email.strip().lower()
    if user_model.objects.filter(username__iexact=email).exists():
        return {'success': False, 'error': f'A user with email {email} already exists.'}

    first_name, last_name = _split_name(name)
    try:
        with transaction.atomic():
            user = user_model.objects.create_user(
                username=email,
                email=email,
                password=password,
                role=role,
                college_id=college_id,
                first_name=first_name[:150],
                last_name=last_name[:150],
            )
    except (DatabaseError, ValueError) as exc:
        return {'success': False, 'error': str(exc)}

    logger.info('Created %s login for %s', role, email)
    return {'success': True, 'user': user}


def get_auth_provisioner():
    return import_string(settings.STUDENT_AUTH_PROVISIONER)
