import os
from dataclasses import dataclass


_FALSE_VALUES = ('0', 'false', 'no', 'off')


@dataclass
class WorkerConfig:
    """Reduce worker settings.

    Read from MR_* environment variables by from_env(); command line flags
    override them.
    """
    intermediate_dir: str = './intermediate'
    output_dir: str = '.'
    log_level: str = 'INFO'
    fsync: bool = True

    @classmethod
    def from_env(cls, environ=None):
        env = os.environ if environ is None else environ
        return cls(
            intermediate_dir=env.get('MR_INTERMEDIATE_DIR', cls.intermediate_dir),
            output_dir=env.get('MR_OUTPUT_DIR', cls.output_dir),
            log_level=env.get('MR_LOG_LEVEL', cls.log_level).upper(),
            fsync=env.get('MR_FSYNC', '1').strip().lower() not in _FALSE_VALUES,
        )
