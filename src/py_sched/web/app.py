"""Flask application factory for the PySched web API.

The ``create_app`` function returns a Flask app with three endpoints:

- ``GET /api/algorithms`` — list the algorithms and the default quantum.
- ``POST /api/run`` — run one simulation and return its events as JSON.
- ``GET /api/quiz/<algorithm>`` — return the quiz for an algorithm.

Each request to ``/api/run`` generates its own workload, so runs never
share process data.
"""

from __future__ import annotations

from flask import Flask, Response, jsonify, request

from py_sched.config import SimulationConfig
from py_sched.events import event_to_dict
from py_sched.logging import Logger, LogLevel
from py_sched.quiz import Quiz
from py_sched.scheduler import SchedulingError
from py_sched.simulation import Algorithm, make_policy, simulate

_HTTP_BAD_REQUEST = 400
_HTTP_NOT_FOUND = 404

MAX_PROCESS_COUNT = 10
MIN_QUANTUM = 10


def _int_field(data: dict[str, object], key: str) -> int | None:
    """Return ``data[key]`` as an int, or None when absent.

    Raises:
        ValueError: If the value is present but not an integer.

    """
    value = data.get(key)
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, int):
        msg = f"'{key}' must be an integer"
        raise ValueError(msg)
    return value


def _check_request_bounds(count: int | None, quantum: int | None) -> None:
    """Keep one request's run small enough to answer in memory.

    Raises:
        ValueError: If *count* or *quantum* is outside what the API serves.

    """
    if count is not None and count > MAX_PROCESS_COUNT:
        msg = f"'count' must be at most {MAX_PROCESS_COUNT}, got {count}"
        raise ValueError(msg)
    if quantum is not None and 0 < quantum < MIN_QUANTUM:
        msg = f"'quantum' must be at least {MIN_QUANTUM}, got {quantum}"
        raise ValueError(msg)


def create_app(config: SimulationConfig | None = None) -> Flask:
    """Create and configure the Flask application.

    Args:
        config: Default simulation settings for every request.

    Returns:
        A configured Flask application ready to serve.

    """
    defaults = config if config is not None else SimulationConfig()
    app = Flask(__name__)

    @app.route("/api/algorithms")
    def algorithms() -> Response:  # pyright: ignore[reportUnusedFunction]
        """Return the available algorithms."""
        return jsonify(
            {
                "algorithms": [a.value for a in Algorithm],
                "default_quantum": defaults.quantum,
            }
        )

    @app.route("/api/run", methods=["POST"])
    def run() -> tuple[Response, int] | Response:  # pyright: ignore[reportUnusedFunction]
        """Run a simulation and return its events.

        Expects JSON body: ``{"algorithm": "...", "quantum": 200, "seed": 1, "count": 4}``
        (everything but ``algorithm`` optional).  ``count`` is capped at
        ``MAX_PROCESS_COUNT`` and ``quantum`` must be at least ``MIN_QUANTUM``.

        Returns:
            JSON with ``algorithm``, ``events``, ``completion_order``,
            ``elapsed``, ``metrics`` and ``log`` fields.

        """
        data = request.get_json(silent=True)
        if not isinstance(data, dict) or "algorithm" not in data:
            return jsonify({"error": "Missing 'algorithm' field"}), _HTTP_BAD_REQUEST

        try:
            count = _int_field(data, "count")
            quantum = _int_field(data, "quantum")
            _check_request_bounds(count, quantum)
            settings = defaults.with_overrides(
                quantum=quantum,
                seed=_int_field(data, "seed"),
                process_count=count,
            )
            policy = make_policy(str(data["algorithm"]), quantum=settings.quantum)
            processes = settings.workload_generator().generate()
        except (SchedulingError, ValueError) as e:
            return jsonify({"error": str(e)}), _HTTP_BAD_REQUEST

        logger = Logger(min_level=LogLevel.INFO)
        result = simulate(policy, processes, tick=settings.tick, logger=logger)
        return jsonify(
            {
                "algorithm": result.algorithm,
                "events": [event_to_dict(e) for e in result.events],
                "completion_order": list(result.completion_order),
                "elapsed": result.elapsed,
                "metrics": result.metrics.as_dict(),
                "log": [str(entry) for entry in logger.entries],
            }
        )

    @app.route("/api/quiz/<algorithm>")
    def quiz(algorithm: str) -> tuple[Response, int] | Response:  # pyright: ignore[reportUnusedFunction]
        """Return the quiz questions (with shuffled options) for *algorithm*."""
        try:
            questions = Quiz(algorithm).questions()
        except ValueError:
            return jsonify({"error": f"Unknown algorithm: {algorithm}"}), _HTTP_NOT_FOUND
        return jsonify(
            {
                "algorithm": algorithm,
                "questions": [
                    {"prompt": q.prompt, "options": list(q.options), "answer": q.answer}
                    for q in questions
                ],
            }
        )

    return app


def main() -> None:
    """Run the web API development server.

    This is the ``py-sched-web`` console entry point.
    """
    app = create_app()
    app.run(debug=True, port=8080)
