import logging

from .php import PhpProbe, PhpScriptRuntime, php_string
from .protocols import Runtime, RuntimeEnvironment
from .python import ImportlibRuntime
from ..config.models import LoaderConfig

logger = logging.getLogger(__name__)


def create_runtime(config: LoaderConfig) -> Runtime:
    """Build the runtime named by ``config.runtime``."""
    logger.debug("Creating %s runtime", config.runtime)
    if config.runtime == "python":
        return ImportlibRuntime()
    return PhpScriptRuntime(
        probe=PhpProbe(php_binary=config.php_binary, sapi=config.sapi),
        check_environment=config.check_environment,
    )


__all__ = [
    "Runtime",
    "RuntimeEnvironment",
    "PhpProbe",
    "PhpScriptRuntime",
    "ImportlibRuntime",
    "create_runtime",
    "php_string",
]
