"""Example: use the geofence engine directly, without Flask or a database."""

from datetime import datetime, timedelta

from src.geo_attendance.geo_attendance.geo.anomaly import detect_anomalies
from src.geo_attendance.geo_attendance.geo.model import LocationSample, OfficeLocation
from src.geo_attendance.geo_attendance.geo.ranking import detect_office_location
from src.geo_attendance.geo_attendance.geo.validation import validate_location


def main():
    offices = [
        OfficeLocation(office_id=1, name="Head Office", latitude=10.7769, longitude=106.7009, radius_meters=100),
        OfficeLocation(office_id=2, name="Warehouse", latitude=10.8231, longitude=106.6297, radius_meters=150),
    ]
    now = datetime.now()
    indoor = LocationSample(latitude=10.7781, longitude=106.7009, accuracy_meters=60, timestamp=now)

    print(validate_location(indoor, offices).to_dict())
    print(detect_office_location(indoor, offices).to_dict())

    an_hour_ago = LocationSample(latitude=21.0285, longitude=105.8542, accuracy_meters=10, timestamp=now - timedelta(hours=1))
    print(detect_anomalies(indoor, [an_hour_ago]).to_dict())


if __name__ == "__main__":
    main()
