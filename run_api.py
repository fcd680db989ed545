"""
Run Customs Review API

Start the FastAPI server together with the background customs review
"""

from urllib.parse import urlparse

import uvicorn

from customs_review.config import get_settings


def main():
    """Start the FastAPI server"""
    settings = get_settings()

    parsed_db = urlparse(settings.database_url)
    db_host = parsed_db.hostname or "localhost"
    db_port = parsed_db.port or 5432
    db_name = parsed_db.path.lstrip('/') if parsed_db.path else "unknown"

    print(f"""
╔═══════════════════════════════════════════════════════════╗
║         Customs Review API - Starting Server              ║
╚═══════════════════════════════════════════════════════════╝

📊 API Information:
   • Host: {settings.host}
   • Port: {settings.port}
   • Docs: http://localhost:{settings.port}/docs

🗄️  Database:
   • Host: {db_host}
   • Port: {db_port}
   • Database: {db_name}

🏛️  Customs Review:
   • Enabled: {settings.review_scheduler_enabled}
   • Interval: {settings.review_interval_seconds}s
   • Review delay: {settings.review_delay_minutes} min
   • Approval probability: {settings.approval_probability}

Starting server...
""")

    uvicorn.run(
        "review_api.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        log_level=settings.log_level.lower(),
        access_log=True
    )


if __name__ == "__main__":
    main()
