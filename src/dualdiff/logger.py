"""Contains the name for the logger of dualdiff modules.

``dualdiff`` uses a simple logging system based on the
`Logging <https://docs.python.org/3/library/logging.html>`__ standard library.
Logging messages are grouped in different levels:

* ``DEBUG``: Details of rule-table construction (rules built, entries skipped).
* ``INFO``: An indication that the installed rule table changed, e.g. after
    a custom rule was registered.

By default, only messages of level ``WARNING`` are displayed. The engine
never logs per elementary operation.

Calling applications can configure the format and log level of the displayed messages
by `Configuring Logging <https://docs.python.org/3/howto/logging.html#configuring-logging>`__
for ``dualdiff.logger.dualdiff_logger``, e.g.::

    >>> import logging
    >>> logging.basicConfig(
    ...     level=logging.DEBUG,
    ...     format="%(asctime)s | %(name)s | %(levelname)s | %(message)s",
    ... )
"""
import logging

logger_name = "dualdiff"
dualdiff_logger = logging.getLogger(logger_name)
