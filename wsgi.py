"""WSGI configuration for production deployment."""
import os

from dotenv import load_dotenv

from dojo_manager import create_app

load_dotenv()

app = create_app(os.getenv('FLASK_ENV', 'production'))
