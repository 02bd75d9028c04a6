"""WSGI entry point for the financial planning application."""

import os
import sys

from finplan import create_app

app = create_app()

if __name__ == "__main__":
    port = 5000

    # PORT environment variable (used by hosting platforms)
    if "PORT" in os.environ:
        port = int(os.environ["PORT"])

    if len(sys.argv) > 2 and sys.argv[1] == "--port":
        port = int(sys.argv[2])

    app.run(debug=app.config["DEBUG"], host="0.0.0.0", port=port)
