import click

from .commands.analyze import analyze_command
from .commands.history import history_command
from .commands.patterns import list_patterns_command
from .commands.review import abandon_command, confirm_command


@click.group()
def app() -> None:
    pass


app.add_command(analyze_command, name="analyze")
app.add_command(confirm_command, name="confirm")
app.add_command(abandon_command, name="abandon")
app.add_command(history_command, name="history")
app.add_command(list_patterns_command, name="patterns")
__all__ = ["app"]
