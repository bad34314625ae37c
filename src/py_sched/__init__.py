"""PySched — an educational CPU scheduling simulator.

Three classic algorithms run over a small synthetic workload:

- **FIFO** (First Come, First Served)
- **Round-Robin** with a fixed time quantum
- **Priority** (lower number runs first)

The core (``process``, ``workload``, ``scheduler``) never prints or
sleeps.  It emits a stream of events that the presentation layer
(``render``, ``repl``, ``web``) turns into something to look at.
"""
