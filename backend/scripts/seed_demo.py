"""CLI script to seed a demo user with one skill, course and education record.
Usage: python scripts/seed_demo.py [--email EMAIL]
"""
import sys
import argparse
import pathlib
from datetime import date
# Ensure `backend/` is on sys.path so `requalify` package imports work when running this script directly
ROOT = pathlib.Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))
from sqlmodel import Session
from requalify.database import engine, create_db_and_tables
from requalify import schemas, services
from requalify.results import Ok


def _report(label, result):
    if isinstance(result, Ok):
        print(f'Created {label} {result.value.id}')
        return result.value
    print(f'Skipped {label}: {result.message}')
    return None


def main(email: str = 'demo@requalify.dev'):
    """Create the demo user and its sub-resources through the services.

    Validation runs as for API requests, so a second run reports the
    email as already in use and seeds nothing.
    """
    create_db_and_tables(engine)
    with Session(engine) as session:
        user = _report('user', services.UserService(session).create(schemas.CreateUserRequest(
            name='Demo User',
            email=email,
            password='demo',
            phone='11999999999',
            birth_date=date(1990, 1, 1),
            current_role='Support Analyst',
            interest_area='Infrastructure',
        )))
        if user is None:
            return
        _report('skill', services.SkillService(session).create(schemas.CreateSkillRequest(
            name='Networks', level='Intermediate', category='Infrastructure',
            proficiency_percentage=60, description='Routing and switching', user_id=user.id,
        )))
        _report('course', services.CourseService(session).create(schemas.CreateCourseRequest(
            title='Cloud Fundamentals', description='Intro to cloud infrastructure', category='Cloud',
            difficulty='Easy', url='https://example.com/cloud', user_id=user.id,
        )))
        _report('education', services.EducationService(session).create(schemas.CreateEducationRequest(
            degree='Technologist in Networks', institution='FIAP', completion_date=date(2015, 12, 1), user_id=user.id,
        )))


if __name__ == '__main__':
    parser = argparse.ArgumentParser()
    parser.add_argument('--email', default='demo@requalify.dev', help='Email of the demo user')
    args = parser.parse_args()
    main(email=args.email)
