import shlex
from pathlib import Path

from rich.text import Text

from stackvod.core.compose_interface import ComposeShellInterface
from stackvod.core.utils.process_command_output import OutputCallback
from stackvod.helpers.jobs_result import JobResult
from stackvod.helpers.jobs_result import OperationError
from stackvod.output.console import CONSOLE
from stackvod.output.styles import Style

SCOPE_SERVICES = 'services'
SCOPE_PROJECTS = 'projects'
SCOPE_ALL = None

HOSTS_FILE_ERROR_MARKER = 'hosts file'


class ArtifactGenerator:
    """
    Renders container definitions with `stackvo.sh generate [scope]`.

    Scope `None` regenerates everything.
    """

    def __init__(self, script: Path, shell: ComposeShellInterface):
        self.script = script
        self.shell = shell

    def command(self, scope: str | None = SCOPE_ALL) -> str:
        cmd = f'bash {shlex.quote(str(self.script))} generate'
        if scope:
            cmd += f' {shlex.quote(scope)}'
        return cmd

    async def generate(self, scope: str | None = SCOPE_ALL, on_line: OutputCallback | None = None,
                       tolerate_hosts_file_errors: bool = False) -> JobResult | OperationError:
        result = await self.shell.execute(self.command(scope), on_line)
        if result == JobResult.BAD and tolerate_hosts_file_errors and HOSTS_FILE_ERROR_MARKER in result.log:
            CONSOLE.print(Text('Generate could not update hosts file, continuing', style=Style.suspicious))
            return JobResult.GOOD
        return result
