from stackbuild.BUILDERS.build_planner import BuildPlanner
from stackbuild.MODELS.service_definition import ServiceDefinition, BuildSpec

def test_plan_splits_builds_and_pulls():
    services = [
        ServiceDefinition(name="db", image="postgres:13"),
        ServiceDefinition(name="api", build=BuildSpec(context="api")),
        ServiceDefinition(name="cache", image="redis"),
        ServiceDefinition(name="web"),
        ServiceDefinition(name="queue", image="redis:latest"),
    ]
    plan = BuildPlanner().plan(services, "myapp")

    assert [s.name for s in plan.builds] == ["api", "web"]
    assert plan.pulls.items() == [
        ("postgres:13", ["myapp/db"]),
        ("redis:latest", ["myapp/cache", "myapp/queue"]),
    ]

def test_image_takes_precedence_over_build():
    services = [ServiceDefinition(name="web", image="nginx", build=BuildSpec(context="."))]
    plan = BuildPlanner().plan(services, "app")

    assert plan.builds == []
    assert plan.pulls.items() == [("nginx:latest", ["app/web"])]
