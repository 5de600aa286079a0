"""Services package for mnemoflow.

Every service follows the scitrera-app-framework plugin pattern: an abstract interface and plugin base in
``base.py``, implementations beside it, and a ``get_<service>(v)`` accessor in the package ``__init__``.

Prefer importing from specific service submodules (e.g., `from .memory import get_memory_service`)
rather than from this top-level package.
"""
