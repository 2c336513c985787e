"""Bootchain: a minimal application bootstrap chain.

A bootstrap chain is an ordered list of modules, small functions that
initialize and start a bigger application. Modules share a variables
container, which may hold a service locator under the reserved ``"di"`` name,
and may be restricted to run under a named environment.

Basic Usage:
    >>> from bootchain.bootstrap import Bootstrap
    >>> from bootchain.container import Container
    >>>
    >>> def configure(container: Container, debug=False):
    ...     container.set("log_level", "DEBUG" if debug else "INFO")
    >>>
    >>> Bootstrap.init({"debug": True}, "staging") \\
    ...     .add_module(configure) \\
    ...     .add_module(["log_level", print], "staging") \\
    ...     .execute()

The package consists of several modules:
    - bootstrap: The chain orchestrator
    - module: Module wrapper and argument resolution
    - container: Variables container shared by modules
    - environment: Lazily detected runtime environment
    - services: A simple service locator
    - signature: Callable introspection
    - domain: Parameter descriptors, the ServiceLocator protocol and reserved names
    - errors: Framework-specific exceptions
"""
