"""External command probes."""

from promptline.probes.compiler import (
    UNKNOWN_COMPILER,
    classify_compiler,
    compiler_name,
    compiler_version,
)
from promptline.probes.tools import (
    CommandOutput,
    CommandRunner,
    SubprocessRunner,
    probe,
    run_command,
)
