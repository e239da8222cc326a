"""Terminal client: dashboard, people, the record/review/summary wizard, resources.

Wizard state is handed from one command to the next as a draft URL.
"""

import os
import tempfile
import time

import click

from ministering.client.api_client import DEFAULT_BASE_URL, ApiError, MinisteringClient
from ministering.client.recorder import VoiceRecorder
from ministering.client.wizard import DraftStage, DraftUrlError, InvalidTransitionError, VisitDraft

AUDIO_CONTENT_TYPES = {
    ".wav": "audio/wav",
    ".mp3": "audio/mpeg",
    ".m4a": "audio/mp4",
    ".ogg": "audio/ogg",
    ".webm": "audio/webm",
}


def _client(ctx: click.Context) -> MinisteringClient:
    return ctx.obj["client"]


def _load_draft(url: str) -> VisitDraft:
    try:
        return VisitDraft.from_url(url)
    except DraftUrlError as e:
        raise click.BadParameter(str(e), param_hint="DRAFT_URL")


def _echo_list(title: str, items: list[str]) -> None:
    if not items:
        return
    click.echo(f"{title}:")
    for item in items:
        click.echo(f"  - {item}")


@click.group()
@click.option("--base-url", envvar="MINISTERING_API_URL", default=DEFAULT_BASE_URL,
              show_default=True, help="API base URL")
@click.option("--token", envvar="MINISTERING_SESSION", default=None,
              help="Session cookie value from a browser login")
@click.pass_context
def client(ctx: click.Context, base_url: str, token: str | None):
    """Ministering Companion terminal client."""
    ctx.ensure_object(dict)
    if "client" not in ctx.obj:
        ctx.obj["client"] = MinisteringClient(base_url, session_token=token)


@client.result_callback()
@click.pass_context
def _close_client(ctx: click.Context, *args, **kwargs):
    ctx.obj["client"].close()


@client.command()
@click.pass_context
def dashboard(ctx: click.Context):
    """People you minister to, most recent first, with featured resources."""
    api = _client(ctx)
    try:
        welcome = api.list_content("dashboard")
        people = api.list_people()
        featured = api.featured_resources()
    except ApiError as e:
        raise click.ClickException(e.message)

    for block in welcome:
        click.echo(block["content"])
    click.echo("")
    if not people:
        click.echo("No people yet. Add one with `add-person`.")
    for person in people:
        family = f" ({person['family']})" if person.get("family") else ""
        click.echo(
            f"[{person['id']}] {person['name']}{family} - {person['status']}, "
            f"{person['totalEntries']} visits, last contact {person['lastContact']}"
        )
        if person.get("lastEntryPreview"):
            click.echo(f"    {person['lastEntryPreview']}")
    if featured:
        click.echo("")
        _echo_list("Featured resources", [r["title"] for r in featured])


@client.command("add-person")
@click.argument("name")
@click.option("--family", default=None, help="Family or household name")
@click.option("--tag", "tags", multiple=True, help="Tag (repeatable)")
@click.option("--status", type=click.Choice(["active", "inactive", "follow-up"]), default=None)
@click.pass_context
def add_person(ctx: click.Context, name: str, family: str | None, tags: tuple[str, ...],
               status: str | None):
    """Add a person or family."""
    try:
        person = _client(ctx).create_person(name, family=family, tags=list(tags) or None,
                                            status=status)
    except ApiError as e:
        raise click.ClickException(e.message)
    click.echo(f"✓ Added {person['name']} (id {person['id']})")


@client.command()
@click.argument("person_id", type=int)
@click.option("--insights", is_flag=True, help="Also ask for patterns and suggestions")
@click.pass_context
def person(ctx: click.Context, person_id: int, insights: bool):
    """A person's visit history."""
    api = _client(ctx)
    try:
        info = api.get_person(person_id)
        entries = api.list_entries(person_id)
        result = api.get_insights(person_id) if insights else None
    except ApiError as e:
        raise click.ClickException(e.message)

    click.echo(f"{info['name']} - {info['status']}")
    for entry in entries:
        click.echo("")
        click.echo(f"{entry['date']}")
        click.echo(f"  {entry.get('summary') or entry['transcript']}")
        _echo_list("  Follow-ups", entry.get("followups") or [])
    if result is not None:
        click.echo("")
        _echo_list("Patterns", result["patterns"])
        _echo_list("Suggestions", result["suggestions"])


@client.command()
@click.argument("person_id", type=int)
@click.option("--file", "audio_file", type=click.Path(exists=True, dir_okay=False),
              default=None, help="Existing recording to upload instead of using the microphone")
@click.option("--seconds", type=float, default=None, help="Record for a fixed duration")
@click.option("--date", default="", help="Visit date (YYYY-MM-DD)")
@click.option("--notes", default="", help="Extra notes for the visit")
@click.pass_context
def record(ctx: click.Context, person_id: int, audio_file: str | None, seconds: float | None,
           date: str, notes: str):
    """Record (or upload) a visit and transcribe it. Prints the review URL."""
    draft = VisitDraft.start(person_id, date=date, notes=notes)
    temp_path = None
    if audio_file is None:
        recorder = VoiceRecorder()
        recorder.start()
        try:
            if seconds:
                time.sleep(seconds)
            else:
                click.prompt("Recording... press Enter to stop", default="", show_default=False)
        finally:
            recorder.stop()
        click.echo(f"Recorded {recorder.elapsed:.1f}s")
        fd, temp_path = tempfile.mkstemp(suffix=".wav")
        os.close(fd)
        audio_file = recorder.write_wav(temp_path)

    content_type = AUDIO_CONTENT_TYPES.get(os.path.splitext(audio_file)[1].lower(),
                                           "application/octet-stream")
    try:
        transcript = _client(ctx).transcribe(
            audio_file, content_type=content_type, person_id=person_id, date=date, notes=notes
        )
    except ApiError as e:
        raise click.ClickException(e.message)
    finally:
        if temp_path:
            os.remove(temp_path)

    draft = draft.with_transcript(transcript)
    click.echo(transcript or "(no speech detected)")
    click.echo(draft.to_url())


@client.command()
@click.argument("draft_url")
@click.option("--transcript", default=None, help="Corrected transcript")
@click.pass_context
def review(ctx: click.Context, draft_url: str, transcript: str | None):
    """Analyze a transcribed draft. Prints the summary URL."""
    draft = _load_draft(draft_url)
    try:
        draft = draft.edit(transcript=transcript)
        analysis = _client(ctx).analyze(draft.transcript)
        draft = draft.with_analysis(analysis)
    except InvalidTransitionError as e:
        raise click.ClickException(str(e))
    except ApiError as e:
        raise click.ClickException(e.message)

    click.echo(draft.summary)
    click.echo(draft.to_url())


@client.command()
@click.argument("draft_url")
@click.option("--save", is_flag=True, help="Save the visit")
@click.pass_context
def summary(ctx: click.Context, draft_url: str, save: bool):
    """Show an analyzed draft; with --save, store it as a visit entry."""
    draft = _load_draft(draft_url)
    if draft.stage != DraftStage.ANALYZED:
        raise click.ClickException("Draft has not been analyzed yet; run `review` first")

    click.echo(draft.summary)
    _echo_list("Follow-ups", draft.followups)
    _echo_list("Scriptures", draft.scriptures)
    _echo_list("Talks", draft.talks)

    if save:
        try:
            _client(ctx).save_entry(draft.to_save_payload())
        except ApiError as e:
            raise click.ClickException(e.message)
        draft = draft.mark_saved()
        click.echo("✓ Visit saved")
        click.echo(draft.to_url())


@client.command()
@click.option("--featured", is_flag=True, help="Only featured resources")
@click.pass_context
def resources(ctx: click.Context, featured: bool):
    """Browse talks, scriptures, articles and service ideas."""
    api = _client(ctx)
    try:
        items = api.featured_resources() if featured else api.list_resources()
    except ApiError as e:
        raise click.ClickException(e.message)
    for item in items:
        author = f" - {item['author']}" if item.get("author") else ""
        click.echo(f"[{item['type']}] {item['title']}{author}")
        if item.get("url"):
            click.echo(f"    {item['url']}")


if __name__ == "__main__":
    client()
