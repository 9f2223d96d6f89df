"""HTTP status codes used by the controllers."""

from http import HTTPStatus

HTTP_200_OK = HTTPStatus.OK
HTTP_201_CREATED = HTTPStatus.CREATED
HTTP_204_NO_CONTENT = HTTPStatus.NO_CONTENT
HTTP_302_FOUND = HTTPStatus.FOUND
HTTP_303_SEE_OTHER = HTTPStatus.SEE_OTHER
HTTP_400_BAD_REQUEST = HTTPStatus.BAD_REQUEST
HTTP_401_UNAUTHORIZED = HTTPStatus.UNAUTHORIZED
HTTP_404_NOT_FOUND = HTTPStatus.NOT_FOUND
HTTP_406_NOT_ACCEPTABLE = HTTPStatus.NOT_ACCEPTABLE
HTTP_500_INTERNAL_SERVER_ERROR = HTTPStatus.INTERNAL_SERVER_ERROR
HTTP_502_BAD_GATEWAY = HTTPStatus.BAD_GATEWAY
HTTP_503_SERVICE_UNAVAILABLE = HTTPStatus.SERVICE_UNAVAILABLE
