import logging

from publicdrive import create_app

logging.basicConfig(level=logging.INFO)

# Vercel serverless function handler
app = create_app()

if __name__ == '__main__':
    app.run(debug=True)
