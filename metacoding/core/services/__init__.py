"""
Services — channel-independent engine logic.

Every service takes an explicit ``project_root`` and never reads the
process working directory on its own. Nothing in here imports click.
"""
