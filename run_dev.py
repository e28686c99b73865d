"""Local development server: `python run_dev.py [--init-db]`."""
import os
import sys

from oceancollect.app import app, logger
from oceancollect.database import create_schema

if __name__ == "__main__":
    if "--init-db" in sys.argv:
        with app.app_context():
            create_schema()
        logger.info("✅ Schema criado (dev)")

    port = int(os.environ.get("PORT", 5000))
    logger.info(f"🚀 Servidor de desenvolvimento na porta {port}")
    app.run(host="127.0.0.1", port=port, debug=True, use_reloader=False)
