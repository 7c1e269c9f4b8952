# Overview: Flask CLI command groups for bootstrap, user administration and catalog seeding.

# Commands Legend (run from the backend directory):
# Prereqs:
# - Activate your virtualenv.
# - Set FLASK_APP=storefront (PowerShell: $env:FLASK_APP="storefront").
# - Use: python -m flask <group> <command> [options]
#
# System bootstrap/repair:
# - python -m flask system init
#   Create any missing tables. Safe to re-run.
# - python -m flask system reset-db --yes
#   DEV/TEST only: drop and recreate all tables (deletes all data).
#
# Users:
# - python -m flask users create --username admin --password "Password123!" --role ADMIN
#   Create a user and its profile (prompts if options are omitted).
#   The only way to create an ADMIN; /register always creates USER.
# - python -m flask users list
#
# Catalog:
# - python -m flask catalog add-category --name "Shoes" --description "Footwear"

import click
from flask.cli import with_appcontext

from .extensions import db
from .models import Category, User
from .models.auth import ROLES, ROLE_USER
from .services.auth_service import register_user, PasswordValidationError, RegistrationError


@click.group('system')
def system_group():
    """System bootstrap and repair commands."""


@system_group.command('init')
@with_appcontext
def init_system():
    """Create all tables that do not exist yet."""
    click.echo("BUILD  Creating tables...")
    db.create_all()
    click.echo("PASS Schema ready. Create an administrator with 'python -m flask users create --role ADMIN'.")


@system_group.command('reset-db')
@click.option('--yes', is_flag=True, help='Skip confirmation')
@with_appcontext
def reset_db(yes):
    """
    DANGER: Drop all tables and recreate schema.

    This will DELETE ALL DATA!
    """
    if not yes:
        click.confirm("WARN This will DELETE ALL DATA. Are you sure?", abort=True)

    click.echo("DELETE  Dropping all tables...")
    db.drop_all()

    click.echo("BUILD  Creating all tables...")
    db.create_all()

    click.echo("PASS Database reset complete.")


@click.group('users')
def users_group():
    """User management commands."""


@users_group.command('create')
@click.option('--username', prompt=True, help='Username')
@click.option('--password', prompt=True, hide_input=True, confirmation_prompt=True, help='Password')
@click.option('--role', type=click.Choice(ROLES), default=ROLE_USER, show_default=True, help='Role')
@with_appcontext
def create_user_cli(username, password, role):
    """
    Create a new user with an empty profile.

    Password must meet strength requirements:
    - Minimum 8 characters
    - At least one uppercase letter
    - At least one lowercase letter
    - At least one digit
    - At least one special character
    """
    try:
        user = register_user(username, password, role=role)
    except PasswordValidationError as e:
        raise click.ClickException(f"Password validation failed: {e}")
    except RegistrationError as e:
        raise click.ClickException(str(e))

    click.echo(f"PASS Created user: {user.username} (ID: {user.user_id}) with role '{user.role}'")


@users_group.command('list')
@with_appcontext
def list_users():
    """List all users with their roles."""
    users = db.session.query(User).order_by(User.user_id.asc()).all()

    if not users:
        click.echo("No users found.")
        return

    click.echo("\n" + "="*50)
    click.echo(f"{'ID':<5} {'Username':<30} {'Role'}")
    click.echo("="*50)

    for user in users:
        click.echo(f"{user.user_id:<5} {user.username:<30} {user.role}")

    click.echo("="*50 + "\n")


@click.group('catalog')
def catalog_group():
    """Catalog seeding commands."""


@catalog_group.command('add-category')
@click.option('--name', required=True, help='Category name')
@click.option('--description', default=None, help='Category description')
@with_appcontext
def add_category(name, description):
    name = name.strip()
    if not name:
        raise click.ClickException("Category name cannot be blank")

    category = Category(name=name, description=description)
    db.session.add(category)
    db.session.commit()
    click.echo(f"PASS Created category: {category.name} (ID: {category.category_id})")


def register_commands(app):
    """Register all CLI commands with Flask app."""
    app.cli.add_command(system_group)
    app.cli.add_command(users_group)
    app.cli.add_command(catalog_group)
