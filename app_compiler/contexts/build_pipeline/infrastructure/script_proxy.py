"""
Script Build Proxy

Runs the external script compiler as a child process.

Modes:
- one-shot: spawn, stream diagnostics, await exit. Exit code 0 is success,
  anything else is a failure carrying that code. In compress mode the emitted
  ``.js`` files are minified afterwards.
- continuous: spawn with the compiler's own watch flag and return at once.
  Diagnostics keep streaming for the life of the process. At most one such
  process exists per proxy; it is released only by ``shutdown``.

Diagnostics:
- stdout: ANSI escape sequences are stripped (the compiler's watch mode
  clears the screen otherwise) and a chunk is forwarded only when it
  contains "error".
- stderr: forwarded verbatim.
"""

import asyncio
import os
import re
import shutil
import sys
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import TextIO

from app_compiler.contexts.build_pipeline.domain.models import BuildConfig, BuildOutcome, Pipeline
from app_compiler.contexts.build_pipeline.infrastructure.file_discovery import list_files_async
from app_compiler.contexts.build_pipeline.infrastructure.outcomes import failure_outcome
from app_compiler.infra.exceptions import BuildException, CompilerNotFoundError, ScriptCompilerError
from app_compiler.infra.observability import LogPerformance, get_logger

logger = get_logger(__name__)

ANSI_ESCAPE = re.compile(r"\x1b(?:\[[0-?]*[ -/]*[@-~]|[@-Z\\-_])")
ERROR_INDICATOR = "error"
READ_CHUNK = 4096


def filter_diagnostics(text: str) -> str | None:
    """Strip ANSI sequences; keep the chunk only when it reports an error."""
    cleaned = ANSI_ESCAPE.sub("", text).replace("\x1b", "").strip()
    if ERROR_INDICATOR in cleaned:
        return cleaned
    return None


@dataclass
class ScriptCompilerHandle:
    """The long-lived compiler process of a watch session."""

    process: asyncio.subprocess.Process
    command: tuple[str, ...]
    pumps: list[asyncio.Task] = field(default_factory=list)
    supervisor: asyncio.Task | None = None

    @property
    def pid(self) -> int:
        return self.process.pid

    @property
    def returncode(self) -> int | None:
        return self.process.returncode

    @property
    def running(self) -> bool:
        return self.process.returncode is None

    async def wait(self) -> int:
        return await self.process.wait()

    def terminate(self) -> None:
        if self.running:
            try:
                self.process.terminate()
            except ProcessLookupError:
                pass


class ScriptBuildProxy:
    def __init__(
        self,
        config: BuildConfig,
        stdout: TextIO | None = None,
        stderr: TextIO | None = None,
    ):
        self.config = config
        self._stdout = stdout
        self._stderr = stderr
        self._handle: ScriptCompilerHandle | None = None

    @property
    def handle(self) -> ScriptCompilerHandle | None:
        return self._handle

    def command(self, continuous: bool = False) -> list[str]:
        cmd = list(self.config.script_command)
        if continuous and self.config.script_watch_flag:
            cmd.append(self.config.script_watch_flag)
        return cmd

    # ========================================================================
    # Public operations
    # ========================================================================

    async def build(self, continuous: bool = False) -> BuildOutcome:
        """Run the compiler once, or start its watch mode, reported as a BuildOutcome."""
        started = time.monotonic()
        try:
            if continuous:
                await self.start_watch()
            else:
                with LogPerformance(logger, "scripts_build"):
                    await self.compile_once()
                    if self.config.compress and self.config.js_compressor_command:
                        await self.compress_output()
        except (BuildException, OSError) as e:
            return failure_outcome(Pipeline.SCRIPTS, e, started)
        return BuildOutcome.success(Pipeline.SCRIPTS, elapsed_s=round(time.monotonic() - started, 3))

    async def compile_once(self) -> None:
        """
        Run the compiler to completion.

        Raises:
            ScriptCompilerError: If the compiler exits with a non-zero code
            CompilerNotFoundError: If the executable is not on PATH
        """
        cmd = self.command(continuous=False)
        process = await self._spawn(cmd)
        await self._stream(process, filtered=True)
        code = await process.wait()
        if code != 0:
            raise ScriptCompilerError(code, cmd)

    async def start_watch(self) -> ScriptCompilerHandle:
        """Spawn the compiler in its own watch mode without awaiting it. Never spawns twice."""
        if self._handle is not None:
            logger.warning("script_compiler_already_running", pid=self._handle.pid)
            return self._handle

        cmd = self.command(continuous=True)
        process = await self._spawn(cmd)
        handle = ScriptCompilerHandle(
            process=process,
            command=tuple(cmd),
            pumps=[
                asyncio.create_task(self._pump_stdout(process.stdout)),
                asyncio.create_task(self._pump_stderr(process.stderr)),
            ],
        )
        handle.supervisor = asyncio.create_task(self._supervise(handle))
        self._handle = handle
        logger.info("script_compiler_watching", pid=handle.pid, command=" ".join(cmd))
        return handle

    async def compress_output(self) -> int:
        """Minify every emitted ``.js`` file in place. Returns the number of files compressed."""
        output_root = self.config.roots.output_root
        compressed = 0
        with LogPerformance(logger, "js_compress"):
            for js_file in await list_files_async(output_root):
                if js_file.suffix != ".js":
                    continue
                cmd = [*self.config.js_compressor_command, str(js_file), "--compress", "--mangle", "-o", str(js_file)]
                process = await self._spawn(cmd)
                await self._stream(process, filtered=False)
                code = await process.wait()
                if code != 0:
                    raise ScriptCompilerError(code, cmd)
                compressed += 1
        return compressed

    async def shutdown(self) -> None:
        """Terminate the watch-mode compiler at process exit."""
        handle = self._handle
        if handle is None:
            return
        handle.terminate()
        await handle.wait()
        await asyncio.gather(*handle.pumps, return_exceptions=True)

    # ========================================================================
    # Process plumbing
    # ========================================================================

    def _locate(self, executable: str) -> str | None:
        """
        Find ``executable`` the way the child process will.

        Commands containing a path separator are relative to the project
        directory (the child's working directory); bare names go through PATH.
        """
        if os.sep in executable or (os.altsep and os.altsep in executable):
            base = self.config.project_dir or Path.cwd()
            return shutil.which(str(base / executable))
        return shutil.which(executable)

    async def _spawn(self, cmd: list[str]) -> asyncio.subprocess.Process:
        if not cmd or self._locate(cmd[0]) is None:
            raise CompilerNotFoundError(cmd)
        logger.debug("spawning_process", command=" ".join(cmd))
        try:
            return await asyncio.create_subprocess_exec(
                *cmd,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
                cwd=str(self.config.project_dir) if self.config.project_dir else None,
            )
        except FileNotFoundError as e:
            raise CompilerNotFoundError(cmd) from e

    async def _stream(self, process: asyncio.subprocess.Process, filtered: bool) -> None:
        await asyncio.gather(
            self._pump_stdout(process.stdout, filtered=filtered),
            self._pump_stderr(process.stderr),
        )

    async def _pump_stdout(self, stream: asyncio.StreamReader | None, filtered: bool = True) -> None:
        if stream is None:
            return
        while chunk := await stream.read(READ_CHUNK):
            text = chunk.decode("utf-8", errors="replace")
            if filtered:
                kept = filter_diagnostics(text)
                if kept is None:
                    continue
                text = kept + "\n"
            out = self._stdout or sys.stdout
            out.write(text)
            out.flush()

    async def _pump_stderr(self, stream: asyncio.StreamReader | None) -> None:
        if stream is None:
            return
        while chunk := await stream.read(READ_CHUNK):
            err = self._stderr or sys.stderr
            err.write(chunk.decode("utf-8", errors="replace"))
            err.flush()

    async def _supervise(self, handle: ScriptCompilerHandle) -> None:
        code = await handle.wait()
        logger.warning("script_compiler_exited", pid=handle.pid, exit_code=code)
