"""
Station Data Models
气象站数据结构
"""

from pydantic import BaseModel, ConfigDict, Field


class Station(BaseModel):
    """
    One row of the station lookup table, keyed by 4-character ICAO id.

    Serialized with the field names the web client reads.
    """
    model_config = ConfigDict(populate_by_name=True)

    station_id: str = Field(..., alias="StationId")
    city: str = Field(..., alias="City")
    state: str = Field(..., alias="State")
    latitude: str = Field(..., alias="Latitude")    # decimal degrees, 2 places
    longitude: str = Field(..., alias="Longitude")  # decimal degrees, 2 places

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True)
