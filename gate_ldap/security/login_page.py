"""
Login Page Stage - Serves the username/password form.

Must sit before any credential-extraction stage; otherwise those stages see
GET /login first and the page never renders.
"""

from html import escape

from gate_ldap.security.http import GatewayRequest, GatewayResponse
from gate_ldap.security.pipeline import Handler, Stage


LOGIN_PAGE_STAGE = "login_page"

_PAGE = """<!DOCTYPE html>
<html>
<head><title>Login Page</title></head>
<body onload="document.f.username.focus();">
<h3>Login with Username and Password</h3>
{message}<form name="f" action="{action}" method="POST">
<table>
<tr><td>User:</td><td><input type="text" name="username" value=""></td></tr>
<tr><td>Password:</td><td><input type="password" name="password"/></td></tr>
<tr><td colspan="2"><input name="submit" type="submit" value="Login"/></td></tr>
</table>
</form>
</body>
</html>
"""


class LoginPageStage(Stage):
    """Render the login form on GET of the login page URL."""

    name = LOGIN_PAGE_STAGE

    def __init__(self, login_page_url: str = "/login", authentication_url: str = "/login"):
        self.login_page_url = login_page_url
        self.authentication_url = authentication_url

    def set_authentication_url(self, url: str):
        """URL the form posts to."""
        self.authentication_url = url

    def __call__(self, request: GatewayRequest, next_handler: Handler) -> GatewayResponse:
        if request.method.upper() != "GET" or request.path != self.login_page_url:
            return next_handler(request)
        return GatewayResponse.html(self.render(request))

    def render(self, request: GatewayRequest) -> str:
        message = ""
        if "error" in request.query:
            message = "<p><font color=\"red\">Your login attempt was not successful, try again.</font></p>\n"
        elif "logout" in request.query:
            message = "<p><font color=\"green\">You have been logged out</font></p>\n"
        return _PAGE.format(message=message, action=escape(self.authentication_url, quote=True))
