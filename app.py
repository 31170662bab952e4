"""Development entry point: `python app.py` (or `flask --app app run`)."""

from src.geo_attendance.geo_attendance.main import create_app

app = create_app()


if __name__ == "__main__":
    app.run(host="0.0.0.0", port=5000, debug=app.config.get("DEBUG", False))
