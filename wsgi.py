from edura import create_app

app = create_app()
