"""
Loading user reduce functions.

A reduce function is named either as "package.module:function", as
"path/to/job.py:function", or by one of the built-in example names.
"""

import importlib
import importlib.util
import os

from .framework.reducer import inverted_index_reduce, word_count_reduce


BUILTIN_REDUCERS = {
    'word_count': word_count_reduce,
    'inverted_index': inverted_index_reduce,
}


def load_job_module(job_path):
    """Load a Python file as a module without putting it on sys.path."""
    name = os.path.splitext(os.path.basename(job_path))[0]
    spec = importlib.util.spec_from_file_location(f"user_job_{name}", job_path)
    if spec is None or spec.loader is None:
        raise ImportError(f"cannot load job file {job_path}")
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


def load_reduce_function(spec):
    """Resolve a reduce function spec to a callable.

    Raises:
        ValueError: spec is malformed
        ImportError: the module or file cannot be loaded
        AttributeError: the module has no such function
        TypeError: the attribute is not callable
    """
    if spec in BUILTIN_REDUCERS:
        return BUILTIN_REDUCERS[spec]

    module_ref, sep, function_name = spec.rpartition(':')
    if not sep or not module_ref or not function_name:
        raise ValueError(
            f"reduce function must be 'module:function' or 'file.py:function', got {spec!r}"
        )

    if module_ref.endswith('.py'):
        module = load_job_module(module_ref)
    else:
        module = importlib.import_module(module_ref)

    fn = getattr(module, function_name, None)
    if fn is None:
        raise AttributeError(f"{function_name} not found in {module_ref}")
    if not callable(fn):
        raise TypeError(f"{module_ref}:{function_name} is not callable")
    return fn
