"""CLI tools for Ministering Companion administration."""

import click
from sqlalchemy.exc import SQLAlchemyError

from ministering.db.enums import ResourceType
from ministering.db.session import SessionLocal
from ministering.schemas.content import SettingCreate, SettingUpdate
from ministering.schemas.resource import ResourceCreate
from ministering.services import content_seed, resource_service, session_service, settings_service


@click.group()
def cli():
    """Ministering Companion admin tools."""
    pass


@cli.command()
def seed_content():
    """
    Insert the default landing/dashboard copy and branding settings.

    Safe to run repeatedly; does nothing once content exists.

    Example:
        ministering seed-content
    """
    db = SessionLocal()
    try:
        if content_seed.seed_initial_content(db):
            click.echo("✓ Seeded initial content")
        else:
            click.echo("Content already seeded, skipping")
    except SQLAlchemyError as e:
        db.rollback()
        raise click.ClickException(f"Error: {e}")
    finally:
        db.close()


@cli.command()
@click.argument("key")
@click.argument("value")
@click.option("--public/--private", default=False, help="Expose via /api/settings/public")
@click.option("--description", default=None, help="What the setting controls")
@click.option("--category", default=None, help="Grouping, e.g. 'branding'")
def set_setting(key: str, value: str, public: bool, description: str | None, category: str | None):
    """
    Create or update an app setting.

    Example:
        ministering set-setting app-name "Ministering Companion" --public --category branding
    """
    db = SessionLocal()
    try:
        if settings_service.get_setting_by_key(db, key):
            fields = {"value": value, "is_public": public}
            if description is not None:
                fields["description"] = description
            if category is not None:
                fields["category"] = category
            settings_service.update_setting(db, key, SettingUpdate(**fields))
            click.echo(f"✓ Updated setting {key}")
        else:
            settings_service.create_setting(
                db,
                SettingCreate(
                    key=key,
                    value=value,
                    description=description,
                    category=category,
                    is_public=public,
                ),
            )
            click.echo(f"✓ Created setting {key}")
    except SQLAlchemyError as e:
        db.rollback()
        raise click.ClickException(f"Error: {e}")
    finally:
        db.close()


@cli.command()
@click.option("--title", required=True, help="Resource title")
@click.option(
    "--type",
    "resource_type",
    required=True,
    type=click.Choice([t.value for t in ResourceType]),
    help="Kind of resource",
)
@click.option("--author", default=None, help="Speaker or author")
@click.option("--url", default=None, help="Link to the resource")
@click.option("--description", default=None, help="Short description")
@click.option("--tag", "tags", multiple=True, help="Tag (repeatable)")
@click.option("--featured", is_flag=True, help="Show on the featured list")
def add_resource(
    title: str,
    resource_type: str,
    author: str | None,
    url: str | None,
    description: str | None,
    tags: tuple[str, ...],
    featured: bool,
):
    """
    Add a gospel resource to the shared catalog.

    Example:
        ministering add-resource --title "The Ministry of Reaching" --type talk --featured
    """
    db = SessionLocal()
    try:
        resource = resource_service.create_gospel_resource(
            db,
            ResourceCreate(
                title=title,
                type=ResourceType(resource_type),
                author=author,
                url=url,
                description=description,
                tags=list(tags) or None,
                featured=featured,
            ),
        )
        click.echo(f"✓ Created resource {resource.id}: {resource.title}")
    except SQLAlchemyError as e:
        db.rollback()
        raise click.ClickException(f"Error: {e}")
    finally:
        db.close()


@cli.command()
def purge_sessions():
    """
    Delete expired login sessions.

    Example:
        ministering purge-sessions
    """
    db = SessionLocal()
    try:
        count = session_service.purge_expired_sessions(db)
        click.echo(f"✓ Purged {count} expired sessions")
    except SQLAlchemyError as e:
        db.rollback()
        raise click.ClickException(f"Error: {e}")
    finally:
        db.close()


if __name__ == "__main__":
    cli()
