from ..exceptions import SDKError


class WebhookError(SDKError):
    pass


class WebhookSignatureError(WebhookError):
    pass


class WebhookChallengeError(WebhookError):
    pass


class WebhookHandlerError(WebhookError):
    pass
