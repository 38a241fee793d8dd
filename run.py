#!/usr/bin/env python3
"""Application entry point"""
import os
import sys

# Accounts created by the seed command; all share the default password
SEED_USERS = (
    ('superadmin@example.com', 'Super', 'Admin', 'SUPERADMIN', 'ACTIVE', True),
    ('admin@example.com', 'Admin', 'User', 'ADMIN', 'ACTIVE', True),
    ('user@example.com', 'Regular', 'User', 'USER', 'PENDING', False),
)
DEFAULT_PASSWORD = 'admin123'

def init_database():
    """Initialize the database"""
    from stashbook import create_app, db
    app = create_app(os.getenv('FLASK_ENV') or 'development')
    with app.app_context():
        db.create_all()
        print("Database initialized!")

def create_superadmin_user():
    """Create the superadmin account"""
    seed_users(SEED_USERS[:1])

def seed_users(accounts=SEED_USERS):
    """Create the seed accounts that do not exist yet"""
    from sqlalchemy.exc import SQLAlchemyError
    from stashbook import create_app, db
    from stashbook.models import User

    app = create_app(os.getenv('FLASK_ENV') or 'development')

    with app.app_context():
        # Create tables if they don't exist
        db.create_all()

        created = []
        for email, first_name, last_name, role, status, verified in accounts:
            if User.query.filter_by(email=email).first():
                print("User {} already exists!".format(email))
                continue

            user = User(
                email=email,
                first_name=first_name,
                last_name=last_name,
                role=role,
                status=status,
                verified=verified
            )
            user.set_password(DEFAULT_PASSWORD)
            db.session.add(user)
            created.append(user)

        try:
            db.session.commit()
        except SQLAlchemyError as e:
            db.session.rollback()
            print("Error: {}".format(e))
            sys.exit(1)

        for user in created:
            print("Created {} ({}, {})".format(user.email, user.role, user.status))
        if created:
            print("Password: {}".format(DEFAULT_PASSWORD))
            print("Please change the password after first login!")

if __name__ == '__main__':
    # Handle command-line arguments
    if len(sys.argv) > 1:
        command = sys.argv[1]
        if command == 'create-superadmin':
            create_superadmin_user()
        elif command == 'seed':
            seed_users()
        elif command == 'init-db':
            init_database()
        else:
            print("Unknown command: {}".format(command))
            print("Available commands: create-superadmin, seed, init-db")
            sys.exit(1)
    else:
        # Run the Flask development server
        from stashbook import create_app
        app = create_app(os.getenv('FLASK_ENV') or 'development')
        app.run(host='0.0.0.0', port=5000, debug=app.config.get('DEBUG', False))
