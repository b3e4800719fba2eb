# CFDDNS-Server
# (C) 2015-2024 Tomas Hlavacek (tmshlvck@gmail.com)
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU General Public License for more details.
#
# You should have received a copy of the GNU General Public License
# along with this program.  If not, see <http://www.gnu.org/licenses/>.

from typing import Optional
from pydantic_settings import BaseSettings
import logging
from enum import IntEnum

class LogLevel(IntEnum):
    DEBUG = logging.DEBUG
    INFO = logging.INFO
    WARNING = logging.WARNING
    ERROR = logging.ERROR
    CRITICAL = logging.CRITICAL


class Settings(BaseSettings):
    # Fallbacks consulted only when the request does not carry the value
    DDNS_TOKEN: Optional[str] = None
    ACCOUNT_ID: Optional[str] = None
    ACCESS_GROUP_ID: Optional[str] = None
    ACCESS_GROUP_NAME: str = "Local IP Address"

    REQUIRE_HTTPS: bool = False
    CLIENT_IP_HEADER: str = "Cf-Connecting-Ip"

    CF_API_URL: str = "https://api.cloudflare.com/client/v4"
    CF_API_TIMEOUT: Optional[float] = None

    ROOT_PATH: str = ''
    LOG_LEVEL: LogLevel = LogLevel.INFO
    LISTEN_ADDRESS: str = "127.0.0.1"
    LISTEN_PORT: int = 8085
    METRICS_PORT: Optional[int] = None

settings = Settings()

logging.basicConfig(format='%(levelname)s:%(message)s', level=int(settings.LOG_LEVEL))
