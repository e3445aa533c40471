"""Foundation domain - config, errors, logging.

Everything else in cargows imports from here; nothing here imports from
the workspace or interface packages.
"""
