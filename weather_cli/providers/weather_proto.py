"""
Protobuf messages for the `weather.WeatherService` RPC.

Equivalent to compiling:

    syntax = "proto3";
    package weather;

    message WeatherRequest {
        string location = 1;
        string date = 2;
    }

    message WeatherResponse {
        string country = 1;
        string city = 2;
        string date = 3;
        float temperature = 4;
        uint32 humidity = 5;
        string description = 6;
    }

    service WeatherService {
        rpc GetWeather(WeatherRequest) returns (WeatherResponse);
    }

The descriptor is assembled here at import time so the package does not need
a protoc build step.
"""

from google.protobuf import descriptor_pb2, descriptor_pool, message_factory

PACKAGE = "weather"
SERVICE_NAME = f"{PACKAGE}.WeatherService"
GET_WEATHER_METHOD = f"/{SERVICE_NAME}/GetWeather"

_FIELD = descriptor_pb2.FieldDescriptorProto


def _add_message(file_proto, name, fields):
    message = file_proto.message_type.add()
    message.name = name
    for number, (field_name, field_type) in enumerate(fields, start=1):
        field = message.field.add()
        field.name = field_name
        field.number = number
        field.type = field_type
        field.label = _FIELD.LABEL_OPTIONAL


def _build_file_descriptor() -> descriptor_pb2.FileDescriptorProto:
    file_proto = descriptor_pb2.FileDescriptorProto()
    file_proto.name = "weather_cli/weather.proto"
    file_proto.package = PACKAGE
    file_proto.syntax = "proto3"

    _add_message(file_proto, "WeatherRequest", [
        ("location", _FIELD.TYPE_STRING),
        ("date", _FIELD.TYPE_STRING),
    ])
    _add_message(file_proto, "WeatherResponse", [
        ("country", _FIELD.TYPE_STRING),
        ("city", _FIELD.TYPE_STRING),
        ("date", _FIELD.TYPE_STRING),
        ("temperature", _FIELD.TYPE_FLOAT),
        ("humidity", _FIELD.TYPE_UINT32),
        ("description", _FIELD.TYPE_STRING),
    ])

    service = file_proto.service.add()
    service.name = "WeatherService"
    method = service.method.add()
    method.name = "GetWeather"
    method.input_type = f".{PACKAGE}.WeatherRequest"
    method.output_type = f".{PACKAGE}.WeatherResponse"

    return file_proto


_pool = descriptor_pool.DescriptorPool()
_pool.Add(_build_file_descriptor())

WeatherRequest = message_factory.GetMessageClass(_pool.FindMessageTypeByName(f"{PACKAGE}.WeatherRequest"))
WeatherResponse = message_factory.GetMessageClass(_pool.FindMessageTypeByName(f"{PACKAGE}.WeatherResponse"))


__all__ = [
    "WeatherRequest",
    "WeatherResponse",
    "SERVICE_NAME",
    "GET_WEATHER_METHOD",
]
