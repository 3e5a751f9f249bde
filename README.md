# starterapp

A small starter service built on Flask and SQLAlchemy:

* an HTTP API that manages customers and events and looks up user profiles
  in a remote employee directory;
* data models and helpers for handling event messages
  (`event_created`, `event_updated`, `participant_enrolled`).

## Installation

```
pip install .
```

For running the tests:

```
pip install ".[test]"
pytest
```

## Configuration

Settings are read from the environment by `starterapp.config`. If
`/configs/.env` exists it is loaded first; otherwise a `.env` file in the
working directory is used when present. Variables already set in the
environment are kept. Missing variables become empty strings.

`ApiSettings` (returned, loaded once and cached, by `api_settings()`)
includes:

```
MODULE_NAME=starter-api
PORT=8080
PATH_PREFIX=
DB_HOST=db.example.com
DB_PORT=1433
DB_DATABASE=starter
DB_FEDAUTH=ActiveDirectoryServicePrincipal
AAD_SP_TENANT_ID=tenant
AAD_SP_CLIENT_ID=client
AAD_SP_CLIENT_SECRET=secret
USER_PROFILE_BASE_URL=http://localhost:9000
```

`ListenerSettings` (returned by `listener_settings()`) holds the
message-handling settings such as `SB_TOPIC`, `SB_SUBSCRIPTION`,
`EMAIL_FROM`, `TEMP_PATH` and `API_1`.

## Commands

| Command              | What it does                                                        |
|----------------------|---------------------------------------------------------------------|
| `starterapp-api`     | Starts the HTTP API on the configured `PORT` (`--host`, default `0.0.0.0`). |
| `starterapp-migrate` | Creates the events and participants tables (`--url` to use another database URL). |

`create_db_engine()` connects to SQL Server through the `mssql+pyodbc`
dialect, so the `pyodbc` driver and an ODBC driver for SQL Server must be
installed to use the configured database. `starterapp-migrate --url
sqlite:///starter.db` works without them.

## HTTP endpoints

All paths are placed under `PATH_PREFIX`.

| Method | Path                           | Body                                           |
|--------|--------------------------------|------------------------------------------------|
| GET    | `/customer`                    | –                                              |
| POST   | `/customer`                    | `{"firstName", "lastName", "email", "phone"}`  |
| POST   | `/events/`                     | `{"eventName", "price", "maxParticipant"}`     |
| PATCH  | `/events/<id>`                 | `{"eventName", "price"}`                       |
| POST   | `/events/<id>/enroll`          | accepted with an empty reply; nothing is stored |
| GET    | `/user-profile/email/<email>`  | –                                              |

Successful calls answer with `{"data": ..., "message": "success", "errors": null}`;
the user-profile lookup answers with the profile service's own body.
Bad input answers with status 400 and a body of the form
`{"code": 400, "message": "", "errors": {"code": "<reason>"}}`.
`firstName` and `lastName` are required when inserting a customer.
Unhandled errors answer with status 500 in the same form. Every response
carries `Access-Control-Allow-Origin: *`, `OPTIONS` requests are answered
as CORS preflights, and `/favicon.ico` answers with 204.

The Swagger 2.0 description of the API is available from
`starterapp.openapi.swagger_document()` (as a dict) and
`starterapp.openapi.swagger_json()` (as text).

## Using the application factory

```python
import logging

import requests
from sqlalchemy import create_engine

from starterapp.app import create_app
from starterapp.config import ApiSettings
from starterapp.entities import Base

settings = ApiSettings.from_environ({"USER_PROFILE_BASE_URL": "http://localhost:9000"})
engine = create_engine("sqlite://")
Base.metadata.create_all(engine)

app = create_app(settings, engine, requests.Session(), logging.getLogger("starter"))
client = app.test_client()
print(client.get("/customer").get_json())
```

## Message models and helpers

* `starterapp.listener_models` holds `MessageResponse` (raw body plus custom
  properties) and the message bodies `RequestData`, `ResponseData`,
  `RequestEventCreate`, `RequestEventUpdated` and
  `RequestParticipantEnrolled`, each built with `from_dict`.
* `starterapp.listener_utils.event_type(message)` reads the `eventType`
  custom property; `contains_event_type` checks it against
  `EVENT_TYPE_REQUEST` or `EVENT_TYPE_RESPONSE`; `error_data` wraps an
  exception with the caller's file and line.
* `write_health(path)` stamps a file with the current time, and
  `run_health(temp_path, logger, interval, stop_event)` does so for
  `<temp_path>/health.txt` every `interval` seconds until the event is set.
* `terminal_logger(stream)` returns a logger printing
  `<time> | LEVEL | message` lines.

## What this package does not do

There is no listener command and nothing that subscribes to a message topic:
the package does not receive messages, forward them to the API or send
e-mail. Only the message models and helpers above are provided. The
`/events/<id>/enroll` endpoint does not record participants.