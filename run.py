#!/usr/bin/env python3
"""
MusicFinder - music catalog search, playlists and favorites

Single entry point for the application.
Run with: python run.py
"""

from dotenv import load_dotenv
load_dotenv()

from app import create_app
from config import config

app = create_app()

if __name__ == '__main__':
    print(f"""
    🎵  MusicFinder

    🌐 Open http://localhost:{config.PORT} in your browser
    📝 Environment: {config.ENV}

    Press Ctrl+C to stop
    """)

    app.run(debug=False, host=config.HOST, port=config.PORT, threaded=True)
