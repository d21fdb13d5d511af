import click
from flask import current_app
from flask.cli import AppGroup, with_appcontext
from werkzeug.security import generate_password_hash

from src.shift_scheduler.shift_scheduler.core.enums import Role
from src.shift_scheduler.shift_scheduler.main import create_app

app = create_app()

users_cli = AppGroup("users", help="Account bootstrap on the table API")

DEMO_STAFF = ("山田 花子", "佐藤 太郎")


def ensure_user(container, *, name: str, password: str, role: Role) -> str:
    """Create the account, or reset its password when one with that name and role exists."""
    existing = next((u for u in container.users_repo.list_all() if u.name == name and u.role == role), None)
    password_hash = generate_password_hash(password)
    if existing:
        container.users_repo.update_user(existing.user_id, password_hash=password_hash)
        return existing.user_id
    return container.users_repo.create_user(name=name, role=role, password_hash=password_hash)


@users_cli.command("seed")
@click.option("--admin-name", default="管理者", show_default=True)
@click.option("--admin-password", prompt=True, hide_input=True, confirmation_prompt=True)
@click.option("--demo-staff", is_flag=True, help="Also create demo staff with password 'staff123'")
@with_appcontext
def seed(admin_name, admin_password, demo_staff):
    container = current_app.extensions["shift_scheduler"]
    if len(admin_password) < 6:
        raise click.ClickException("Password must be at least 6 characters")

    admin_id = ensure_user(container, name=admin_name, password=admin_password, role=Role.ADMIN)
    click.echo(f"admin ready: {admin_name} (id={admin_id})")

    if demo_staff:
        for name in DEMO_STAFF:
            staff_id = ensure_user(container, name=name, password="staff123", role=Role.STAFF)
            click.echo(f"staff ready: {name} (id={staff_id})")


app.cli.add_command(users_cli)

if __name__ == "__main__":
    app.run(debug=app.config["DEBUG"])
