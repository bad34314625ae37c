"""Web API for PySched.

This package provides a Flask application that runs simulations over
HTTP and returns their events as JSON.  It is an **optional** extra —
install with::

    pip install py-sched[web]

The ``create_app`` factory in ``app.py`` serves three endpoints:

- ``GET /api/algorithms`` — the algorithms a client can ask for.
- ``POST /api/run`` — run one simulation and return its events.
- ``GET /api/quiz/<algorithm>`` — the quiz for one algorithm.
"""
