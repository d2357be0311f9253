"""Application entry point."""
import os

import click
from dotenv import load_dotenv
from flask.cli import with_appcontext

from dojo_manager import create_app, db

# Load environment variables
load_dotenv()

# Create Flask app
app = create_app(os.getenv('FLASK_ENV', 'development'))

@app.cli.command()
@with_appcontext
def reset_db():
    """Reset database completely."""
    if click.confirm('This will delete all data and recreate tables. Continue?'):
        db.drop_all()
        db.create_all()
        click.echo('Database reset complete!')

        if click.confirm('Seed with sample dojo data?'):
            from dojo_manager.services.seed_service import SeedService

            SeedService.seed_all()
            click.echo('Database seeded.')

if __name__ == '__main__':
    # Development server
    port = int(os.environ.get('PORT', 5000))
    host = os.environ.get('HOST', '127.0.0.1')
    debug = os.environ.get('FLASK_ENV') == 'development'

    app.run(host=host, port=port, debug=debug)
