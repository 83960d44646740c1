"""HTTP layer: request parsing, response bodies and the Flask application."""