from app.audittrack import create_app

app = create_app()
