"""
System endpoint, error handler and CLI tests.
"""

from storefront.extensions import db
from storefront.models import Category, Profile, User


class TestHealth:
    def test_health_ok(self, client):
        res = client.get("/health")
        assert res.status_code == 200
        body = res.get_json()
        assert body["status"] == "healthy"
        assert body["checks"]["database"]["status"] == "healthy"


class TestCors:
    def test_allowed_origin_echoed(self, client):
        res = client.get("/categories", headers={"Origin": "http://localhost:5173"})
        assert res.headers["Access-Control-Allow-Origin"] == "http://localhost:5173"

    def test_unknown_origin_ignored(self, client):
        res = client.get("/categories", headers={"Origin": "http://evil.example"})
        assert "Access-Control-Allow-Origin" not in res.headers


class TestCli:
    def test_create_admin_user(self, app):
        runner = app.test_cli_runner()
        result = runner.invoke(
            args=["users", "create", "--username", "root", "--password", "Password123!", "--role", "ADMIN"]
        )
        assert result.exit_code == 0, result.output
        assert "PASS" in result.output

        with app.app_context():
            user = db.session.query(User).filter_by(username="root").one()
            assert user.role == "ADMIN"
            assert db.session.query(Profile).filter_by(user_id=user.user_id).count() == 1

    def test_create_user_weak_password_fails(self, app):
        runner = app.test_cli_runner()
        result = runner.invoke(args=["users", "create", "--username", "root", "--password", "weak"])
        assert result.exit_code != 0
        assert "Password validation failed" in result.output

    def test_add_category(self, app):
        runner = app.test_cli_runner()
        result = runner.invoke(args=["catalog", "add-category", "--name", "Shoes", "--description", "Footwear"])
        assert result.exit_code == 0, result.output

        with app.app_context():
            category = db.session.query(Category).one()
            assert category.name == "Shoes"
            assert category.description == "Footwear"

    def test_list_users(self, app, make_user):
        make_user("alice")
        result = app.test_cli_runner().invoke(args=["users", "list"])
        assert result.exit_code == 0
        assert "alice" in result.output
