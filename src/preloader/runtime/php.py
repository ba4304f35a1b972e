"""PHP runtime: renders an ``opcache.preload`` script.

The preload script runs inside the PHP process; this module only writes it.
Each ``ensure_loaded``/``compile_file`` call becomes one statement, and an
optional guard at the top of the script repeats the environment checks so a
misconfigured server refuses to boot.
"""

import json
import logging
import subprocess
from pathlib import Path
from typing import Optional, Union

from ..errors import EnvironmentCheckError
from .protocols import RuntimeEnvironment, environment_messages

logger = logging.getLogger(__name__)

OPCACHE = "Opcache"
OPCACHE_COMPILE_FILE = "opcache_compile_file"
CLI_SAPI = "cli"

_PROBE_SNIPPET = (
    "echo json_encode(["
    "'enable' => (bool) ini_get('opcache.enable'),"
    "'enable_cli' => (bool) ini_get('opcache.enable_cli'),"
    "'compile_file' => function_exists('opcache_compile_file'),"
    "'sapi' => PHP_SAPI,"
    "]);"
)

_GUARD = """\
if (!ini_get('opcache.enable')) {{
\techo {not_available};
\texit(1);
}}

if (!function_exists('opcache_compile_file')) {{
\techo {no_compile};
\texit(1);
}}

if ('cli' === PHP_SAPI && !ini_get('opcache.enable_cli')) {{
\techo {no_cli};
\texit(1);
}}
"""


def php_string(value: str) -> str:
    """Quote ``value`` as a single-quoted PHP string literal."""
    return "'%s'" % value.replace("\\", "\\\\").replace("'", "\\'")


class PhpProbe:
    """Queries a PHP binary for the opcache settings relevant to preloading.

    :param php_binary: PHP executable to run.
    :param sapi: SAPI that will run the preload script (e.g. ``fpm-fcgi``).
        Defaults to the SAPI reported by the probe, which is ``cli``.
    """

    def __init__(self, php_binary: str = "php", sapi: Optional[str] = None, timeout: float = 30.0):
        self.php_binary = php_binary
        self.sapi = sapi
        self.timeout = timeout

    def probe(self) -> RuntimeEnvironment:
        logger.debug("Probing PHP environment with: %s", self.php_binary)
        try:
            result = subprocess.run(
                [self.php_binary, "-r", _PROBE_SNIPPET],
                capture_output=True,
                text=True,
                check=True,
                timeout=self.timeout,
            )
        except FileNotFoundError as e:
            raise EnvironmentCheckError(f"PHP binary {self.php_binary} was not found.") from e
        except subprocess.CalledProcessError as e:
            logger.debug("PHP probe stderr: %s", e.stderr)
            raise EnvironmentCheckError(
                f"PHP binary {self.php_binary} exited with status {e.returncode}."
            ) from e
        except subprocess.TimeoutExpired as e:
            raise EnvironmentCheckError(f"PHP binary {self.php_binary} timed out.") from e

        try:
            data = json.loads(result.stdout)
        except json.JSONDecodeError as e:
            raise EnvironmentCheckError(
                f"Unexpected output from {self.php_binary}: {result.stdout.strip()!r}"
            ) from e

        sapi = self.sapi or data.get("sapi", CLI_SAPI)
        logger.debug("PHP probe result: %s (sapi=%s)", data, sapi)

        return RuntimeEnvironment(
            cache_name=OPCACHE,
            compile_primitive=OPCACHE_COMPILE_FILE,
            cache_enabled=bool(data.get("enable")),
            compile_available=bool(data.get("compile_file")),
            cli=sapi == CLI_SAPI,
            cli_cache_enabled=bool(data.get("enable_cli")),
        )


class PhpScriptRuntime:
    """Collects preload statements and renders them as a PHP script.

    :param probe: Used by ``environment()``; a default ``PhpProbe`` if omitted.
    :param check_environment: Prepend the opcache guard to the script.
    """

    def __init__(self, probe: Optional[PhpProbe] = None, check_environment: bool = True):
        self.probe = probe or PhpProbe()
        self.check_environment = check_environment
        self._seen: set[tuple[str, str]] = set()
        self._statements: list[str] = []

    def _record(self, kind: str, statement: str, path: str) -> None:
        if (kind, path) in self._seen:
            logger.debug("Already recorded %s %s", kind, path)
            return
        self._seen.add((kind, path))
        self._statements.append(statement)

    def ensure_loaded(self, path: str, required: bool = True) -> None:
        kind = "require_once" if required else "include_once"
        self._record(kind, f"{kind} {php_string(path)};", path)

    def compile_file(self, path: str) -> None:
        self._record("compile", f"{OPCACHE_COMPILE_FILE}({php_string(path)});", path)

    def environment(self) -> RuntimeEnvironment:
        return self.probe.probe()

    @property
    def statements(self) -> list[str]:
        return list(self._statements)

    def render(self) -> str:
        lines = ["<?php declare(strict_types = 1);", ""]

        if self.check_environment:
            not_available, no_compile, no_cli = environment_messages(OPCACHE, OPCACHE_COMPILE_FILE)
            lines.append(
                _GUARD.format(
                    not_available=php_string(not_available),
                    no_compile=php_string(no_compile),
                    no_cli=php_string(no_cli),
                )
            )

        lines.extend(self._statements)
        return "\n".join(lines) + "\n"

    def write(self, path: Union[str, Path]) -> Path:
        """Write the rendered script to ``path``."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(self.render(), encoding="utf-8")
        logger.info("Wrote preload script with %d statement(s): %s", len(self._statements), path)
        return path
