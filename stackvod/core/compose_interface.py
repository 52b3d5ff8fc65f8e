import asyncio
import os
import pprint
import shlex
import sys
from pathlib import Path

from rich.text import Text

from stackvod.core.config import Config
from stackvod.core.utils.process_command_output import OutputCallback
from stackvod.core.utils.process_command_output import STREAM_LIMIT
from stackvod.core.utils.process_command_output import process_output_till_done
from stackvod.helpers.jobs_result import JobResult
from stackvod.helpers.jobs_result import OperationError
from stackvod.helpers.jobs_result import describe_output
from stackvod.output.console import CONSOLE
from stackvod.output.styles import Style


class ComposeShellInterface:
    def __init__(self, root: Path, compose_files: list[str], projects_compose_file: str,
                 compose_bin: str = 'docker compose', env_file: str = '.env', execution_envs: dict = None,
                 verbose: bool = False, debug: bool = False):
        self.root = root
        self.compose_files = compose_files
        self.projects_compose_file = projects_compose_file
        self.compose_bin = compose_bin
        self.env_file = env_file
        self.execution_envs = dict(os.environ)
        if execution_envs is not None:
            self.execution_envs |= execution_envs
        self.verbose_docker_compose_commands = verbose
        self.debug_docker_compose_commands = debug

    @classmethod
    def from_config(cls, config: Config) -> 'ComposeShellInterface':
        return cls(
            root=config.root,
            compose_files=config.compose_files,
            projects_compose_file=config.projects_compose_file,
            compose_bin=config.docker_compose_bin,
            env_file=config.env_file_path.name,
            execution_envs={'DOCKER_HOST': config.docker_host},
            verbose=config.verbose_docker_compose_commands,
            debug=config.debug_docker_compose_commands,
        )

    def _base(self, compose_files: list[str], profiles: list[str]) -> str:
        files = ' '.join(f'-f {shlex.quote(file)}' for file in compose_files)
        profiles = ' '.join(f'--profile {shlex.quote(profile)}' for profile in profiles)
        return ' '.join(filter(None, [
            self.compose_bin, f'--env-file {shlex.quote(self.env_file)}', files, profiles
        ]))

    def up_command(self, services: list[str], profiles: list[str], build: bool | None = True,
                   compose_files: list[str] | None = None) -> str:
        # None keeps compose defaults
        build_flag = {True: ' --build', False: ' --no-build', None: ''}[build]
        return (f'{self._base(compose_files or self.compose_files, profiles)} up -d{build_flag} '
                + shlex.join(services))

    def down_command(self, services: list[str], profiles: list[str]) -> str:
        return f'{self._base(self.compose_files, profiles)} down ' + shlex.join(services)

    def project_build_command(self, project: str) -> str:
        return f'{self._base([self.projects_compose_file], [])} build ' + shlex.quote(project)

    def project_up_command(self, project: str) -> str:
        return self.up_command([project], [], build=False, compose_files=[self.projects_compose_file])

    async def execute(self, cmd: str, on_line: OutputCallback | None = None) -> JobResult | OperationError:
        sys.stdout.flush()

        process = await asyncio.create_subprocess_shell(
            cmd,
            env=self.execution_envs,
            cwd=self.root,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
            limit=STREAM_LIMIT,
        )
        debug = f'; in {self.root}; with {pprint.pformat(self.execution_envs)}' \
            if self.debug_docker_compose_commands else ''
        CONSOLE.print(Text(
            f'{cmd}',
            style=Style.context
        ) + ' ' + Text(
            f'{debug}',
            style=Style.regular
        ))
        try:
            stdout, stderr = await process_output_till_done(process, self.verbose_docker_compose_commands, on_line)
        except ValueError as e:
            # a single line over STREAM_LIMIT
            if process.returncode is None:
                process.kill()
            await process.wait()
            CONSOLE.print(Text(f"Command output unreadable: {cmd}", style=Style.bad))
            return OperationError(f'Command output unreadable: {e}', process.returncode)

        if process.returncode != 0:
            CONSOLE.print(Text(f"Command failed with exit code {process.returncode}: {cmd}", style=Style.bad))
            return OperationError(describe_output(stdout, stderr), process.returncode, stdout, stderr)

        return JobResult.GOOD

    async def dc_up(self, services: list[str], profiles: list[str],
                    build: bool | None = True) -> JobResult | OperationError:
        return await self.execute(self.up_command(services, profiles, build))

    async def dc_down(self, services: list[str], profiles: list[str]) -> JobResult | OperationError:
        print(f'Downing {services} containers')
        return await self.execute(self.down_command(services, profiles))
