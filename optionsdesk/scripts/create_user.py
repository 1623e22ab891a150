"""
Create a user directly in the database (seeding, support). Run from project root:
  python -m optionsdesk.scripts.create_user USERNAME EMAIL PASSWORD [experience_level]
Example:
  python -m optionsdesk.scripts.create_user alice alice@example.com your-secure-password NOVICE
"""
import argparse
import logging
import sys

from pydantic import EmailStr, TypeAdapter, ValidationError

from optionsdesk.core.config import get_settings
from optionsdesk.core.database import Database
from optionsdesk.core.exceptions import DuplicateEmailError
from optionsdesk.core.security import hash_password
from optionsdesk.models import ExperienceLevel, User
from optionsdesk.schemas.auth import (
    PASSWORD_MAX_BYTES,
    PASSWORD_MAX_LEN,
    PASSWORD_MIN_LEN,
    USERNAME_MAX_LEN,
)
from optionsdesk.services.users import commit_or_duplicate_email, get_user_by_email, normalize_email

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%SZ",
)
logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Create an OptionsDesk user.")
    parser.add_argument("username", help=f"Username (1-{USERNAME_MAX_LEN} chars)")
    parser.add_argument("email", help="Email address (login key)")
    parser.add_argument("password", help=f"Password ({PASSWORD_MIN_LEN}-{PASSWORD_MAX_LEN} chars)")
    parser.add_argument(
        "experience_level",
        nargs="?",
        default=ExperienceLevel.NOVICE.value,
        choices=[level.value for level in ExperienceLevel],
    )
    args = parser.parse_args(argv)

    username = args.username.strip()
    if not username or len(username) > USERNAME_MAX_LEN:
        logger.error("Invalid username length.")
        return 1
    if len(args.password) < PASSWORD_MIN_LEN or len(args.password) > PASSWORD_MAX_LEN:
        logger.error("Password must be %s-%s characters.", PASSWORD_MIN_LEN, PASSWORD_MAX_LEN)
        return 1
    if len(args.password.encode("utf-8")) > PASSWORD_MAX_BYTES:
        logger.error("Password must be at most %s bytes when UTF-8 encoded.", PASSWORD_MAX_BYTES)
        return 1
    try:
        email = normalize_email(TypeAdapter(EmailStr).validate_python(args.email))
    except ValidationError:
        logger.error("Invalid email address: %s", args.email)
        return 1

    settings = get_settings()
    database = Database(settings.DATABASE_URL)
    db = database.session()
    try:
        if get_user_by_email(db, email) is not None:
            logger.error("User with email '%s' already exists.", email)
            return 1
        user = User(
            username=username,
            email=email,
            password_hash=hash_password(args.password, settings.BCRYPT_ROUNDS),
            experience_level=args.experience_level,
        )
        db.add(user)
        commit_or_duplicate_email(db)
        logger.info("Created user '%s' (%s) with id %s.", username, email, user.id)
        return 0
    except DuplicateEmailError:
        logger.error("User with email '%s' already exists.", email)
        return 1
    finally:
        db.close()
        database.dispose()


if __name__ == "__main__":
    sys.exit(main())
