from akeditz.models.projects import Project
from akeditz.models.users import User
from akeditz.projects.service import project_access

PROJECT = Project.model_validate({
    "_id": "p1",
    "title": "Portfolio",
    "price": "49.99",
    "demoUrl": "https://demo",
    "sourceCode": "https://src",
    "documentation": "https://docs",
})

def test_anonymous_sees_demo_only():
    access = project_access(PROJECT, None, [])
    assert access.demo_url == "https://demo"
    assert access.source_code is None
    assert access.documentation is None
    assert not access.purchased

def test_buyer_sees_source_and_docs():
    user = User.model_validate({"_id": "u1", "purchasedProjects": ["p1"]})
    access = project_access(PROJECT, user, user.purchased_projects)
    assert access.purchased
    assert access.source_code == "https://src"
    assert access.documentation == "https://docs"

def test_admin_sees_everything_without_purchase():
    admin = User.model_validate({"_id": "a1", "role": "admin"})
    access = project_access(PROJECT, admin, [])
    assert not access.purchased
    assert access.source_code == "https://src"

def test_other_purchases_do_not_unlock():
    user = User.model_validate({"_id": "u1"})
    assert project_access(PROJECT, user, ["p2"]).source_code is None
