from feedback_collector.api import FeedbackController, health
from feedback_collector.dashboard.routes import routes as routes_dashboard

ROUTES = [
    *routes_dashboard,
    FeedbackController,
    health,
]
