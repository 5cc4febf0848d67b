"""Routes package for the equipment rental application."""


def register_routes(app):
    """Register all route blueprints with the application."""
    from .machines import machines_bp
    from .content import content_bp
    from .categories import categories_bp
    from .videos import videos_bp
    from .uploads import uploads_bp

    app.register_blueprint(machines_bp, url_prefix='/api/machines')
    app.register_blueprint(content_bp, url_prefix='/api/content')
    app.register_blueprint(categories_bp, url_prefix='/api')
    app.register_blueprint(videos_bp, url_prefix='/api')
    app.register_blueprint(uploads_bp, url_prefix='/api/uploads')
