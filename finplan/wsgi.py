#setup: pip install -e ".[test]"
#setup: flask --app finplan.wsgi run --port 5000 --debug

from finplan.app import create_app

app = create_app()


if __name__ == "__main__":
    app.run(port=5000, debug=True)
