# server/services/mock_data.py
"""Fixture datasets served by the dashboard pages that are not backed by storage yet"""

DRIVERS = [
    {
        "id": "driver_001",
        "full_name": "Juan Pérez",
        "email": "juan@example.com",
        "phone": "+123456789",
        "status": "active",
        "rating": 4.8,
        "completed_rides": 245,
        "verified": True,
        "created_at": "2023-01-15",
    },
    {
        "id": "driver_002",
        "full_name": "María López",
        "email": "maria@example.com",
        "phone": "+122333444",
        "status": "inactive",
        "rating": 4.5,
        "completed_rides": 120,
        "verified": True,
        "created_at": "2023-02-20",
    },
    {
        "id": "driver_003",
        "full_name": "Carlos Rodríguez",
        "email": "carlos@example.com",
        "phone": "+155566677",
        "status": "pending",
        "rating": 0,
        "completed_rides": 0,
        "verified": False,
        "created_at": "2023-06-10",
    },
    {
        "id": "driver_004",
        "full_name": "Ana Martínez",
        "email": "ana@example.com",
        "phone": "+199988877",
        "status": "active",
        "rating": 4.9,
        "completed_rides": 320,
        "verified": True,
        "created_at": "2022-11-05",
    },
    {
        "id": "driver_005",
        "full_name": "Roberto Sánchez",
        "email": "roberto@example.com",
        "phone": "+166677788",
        "status": "suspended",
        "rating": 3.2,
        "completed_rides": 45,
        "verified": True,
        "created_at": "2023-03-18",
    },
]


def _ride(ride_id, status, pickup, dropoff, fare, date, time, duration, distance,
          passenger_name, passenger_rating, rating=None, driver=None):
    ride = {
        "id": ride_id,
        "status": status,
        "pickup_address": pickup,
        "dropoff_address": dropoff,
        "fare": fare,
        "date": date,
        "time": time,
        "duration": duration,
        "distance": distance,
        "passenger_name": passenger_name,
        "passenger_rating": passenger_rating,
        "rating": rating,
    }
    if driver:
        ride["driver_id"], ride["driver_name"], ride["driver_rating"] = driver
    return ride


_JUAN = ("driver_001", "Juan Pérez", 4.8)
_MARIA = ("driver_002", "María López", 4.6)
_ANA = ("driver_004", "Ana Martínez", 4.9)

ADMIN_RIDES = [
    _ride("ride_001", "completed", "Av. Winston Churchill, Santo Domingo", "Av. Abraham Lincoln, Santo Domingo",
          250, "2023-10-20", "14:30:00", 22, 5.7, "Carlos Méndez", 4.8, 5, _JUAN),
    _ride("ride_002", "completed", "Av. 27 de Febrero, Santo Domingo", "Av. John F. Kennedy, Santo Domingo",
          180, "2023-10-20", "10:15:00", 15, 3.2, "María Rodríguez", 4.6, 4, _MARIA),
    _ride("ride_003", "cancelled", "Calle El Conde, Zona Colonial", "Malecón Center, Santo Domingo",
          0, "2023-10-19", "18:45:00", 0, 2.8, "Juan Pérez", 4.2, None, _JUAN),
    _ride("ride_004", "completed", "Aeropuerto Las Américas, Santo Domingo", "Hotel Jaragua, Santo Domingo",
          950, "2023-10-19", "09:20:00", 45, 28.5, "Luis González", 4.9, 5, _ANA),
    _ride("ride_005", "in_progress", "Universidad APEC, Santo Domingo", "Parque Mirador Sur, Santo Domingo",
          220, "2023-10-20", "16:10:00", 18, 4.3, "Ana Torres", 4.7, None, _MARIA),
    _ride("ride_006", "completed", "Blue Mall, Santo Domingo", "Ágora Mall, Santo Domingo",
          150, "2023-10-17", "13:40:00", 12, 2.1, "Roberto Sánchez", 4.5, 4, _JUAN),
    _ride("ride_007", "cancelled", "Acropolis Center, Santo Domingo", "Plaza Central, Santo Domingo",
          0, "2023-10-15", "11:05:00", 0, 6.2, "Carmen Díaz", 4.3, None, _MARIA),
]

DRIVER_RIDES = [
    _ride("ride_001", "completed", "Av. Winston Churchill, Santo Domingo", "Av. Abraham Lincoln, Santo Domingo",
          250, "2023-10-20", "14:30:00", 22, 5.7, "Carlos Méndez", 4.8, 5),
    _ride("ride_002", "completed", "Av. 27 de Febrero, Santo Domingo", "Av. John F. Kennedy, Santo Domingo",
          180, "2023-10-20", "10:15:00", 15, 3.2, "María Rodríguez", 4.6, 4),
    _ride("ride_003", "cancelled", "Calle El Conde, Zona Colonial", "Malecón Center, Santo Domingo",
          0, "2023-10-19", "18:45:00", 0, 2.8, "Juan Pérez", 4.2),
    _ride("ride_004", "completed", "Aeropuerto Las Américas, Santo Domingo", "Hotel Jaragua, Santo Domingo",
          950, "2023-10-19", "09:20:00", 45, 28.5, "Luis González", 4.9, 5),
    _ride("ride_005", "completed", "Universidad APEC, Santo Domingo", "Parque Mirador Sur, Santo Domingo",
          220, "2023-10-18", "16:10:00", 18, 4.3, "Ana Torres", 4.7, 5),
    _ride("ride_006", "completed", "Blue Mall, Santo Domingo", "Ágora Mall, Santo Domingo",
          150, "2023-10-17", "13:40:00", 12, 2.1, "Roberto Sánchez", 4.5, 4),
    _ride("ride_007", "cancelled", "Acropolis Center, Santo Domingo", "Plaza Central, Santo Domingo",
          0, "2023-10-15", "11:05:00", 0, 6.2, "Carmen Díaz", 4.3),
]

USERS = [
    {"id": "user_001", "full_name": "Juan Pérez", "email": "juan@example.com", "role": "driver",
     "status": "active", "last_login": "2023-06-15", "created_at": "2023-01-10"},
    {"id": "user_002", "full_name": "María López", "email": "maria@example.com", "role": "driver",
     "status": "inactive", "last_login": "2023-05-20", "created_at": "2023-02-05"},
    {"id": "user_003", "full_name": "Carlos Rodríguez", "email": "carlos@example.com", "role": "admin",
     "status": "active", "last_login": "2023-06-18", "created_at": "2022-11-15"},
    {"id": "user_004", "full_name": "Ana Martínez", "email": "ana@example.com", "role": "driver",
     "status": "suspended", "last_login": "2023-04-10", "created_at": "2023-03-12"},
    {"id": "user_005", "full_name": "Roberto Sánchez", "email": "roberto@example.com", "role": "superadmin",
     "status": "active", "last_login": "2023-06-18", "created_at": "2022-10-01"},
]

REGIONS = [
    {"id": "reg_001", "name": "Capital", "code": "CAP", "status": "active", "admins": 3, "drivers": 32,
     "created_at": "2022-10-15", "coordinates": {"lat": 18.4861, "lng": -69.9312}},
    {"id": "reg_002", "name": "Norte", "code": "NTE", "status": "active", "admins": 2, "drivers": 18,
     "created_at": "2023-01-20", "coordinates": {"lat": 19.7983, "lng": -70.6927}},
    {"id": "reg_003", "name": "Sur", "code": "SUR", "status": "active", "admins": 1, "drivers": 14,
     "created_at": "2023-02-05", "coordinates": {"lat": 18.2083, "lng": -71.0950}},
    {"id": "reg_004", "name": "Este", "code": "EST", "status": "active", "admins": 1, "drivers": 11,
     "created_at": "2023-03-10", "coordinates": {"lat": 18.6821, "lng": -68.4505}},
    {"id": "reg_005", "name": "Oeste", "code": "OES", "status": "inactive", "admins": 1, "drivers": 7,
     "created_at": "2023-04-25", "coordinates": {"lat": 19.1800, "lng": -71.7000}},
]

ROLES = [
    {
        "id": "superadmin",
        "name": "Super Administrador",
        "description": "Administrador con acceso total al sistema",
        "permissions": [
            "view_all_rides", "manage_drivers", "view_stats", "manage_regions",
            "manage_admins", "configure_system", "manage_roles",
        ],
        "level": 3,
        "users_count": 2,
        "created_at": "2022-10-01",
        "updated_at": "2023-01-15",
    },
    {
        "id": "admin",
        "name": "Administrador",
        "description": "Administrador con acceso a gestión de conductores y estadísticas",
        "permissions": ["view_all_rides", "manage_drivers", "view_stats", "manage_regions"],
        "level": 2,
        "users_count": 8,
        "created_at": "2022-10-01",
        "updated_at": "2023-01-15",
    },
    {
        "id": "driver",
        "name": "Conductor",
        "description": "Conductor que ofrece servicios de transporte",
        "permissions": [
            "view_own_rides", "update_own_status", "update_own_location", "accept_rides", "complete_rides",
        ],
        "level": 1,
        "users_count": 112,
        "created_at": "2022-10-01",
        "updated_at": "2023-03-10",
    },
]


def _stats(period, total_rides, active_drivers, completion_rate, avg_rating, revenue, users=None, regions=None):
    row = {
        "period": period,
        "total_rides": total_rides,
        "active_drivers": active_drivers,
        "completion_rate": completion_rate,
        "avg_rating": avg_rating,
        "revenue": revenue,
    }
    if users is not None:
        row["users"] = users
        row["regions"] = regions
    return row


ADMIN_STATS = {
    "day": [
        _stats("Hoy", 145, 12, 92, 4.7, 8750),
        _stats("Ayer", 132, 10, 94, 4.6, 7950),
        _stats("Hace 2 días", 156, 14, 91, 4.8, 9250),
        _stats("Hace 3 días", 128, 11, 89, 4.5, 7600),
        _stats("Hace 4 días", 142, 13, 93, 4.7, 8400),
        _stats("Hace 5 días", 138, 12, 90, 4.6, 8200),
        _stats("Hace 6 días", 121, 9, 88, 4.5, 7100),
    ],
    "week": [
        _stats("Esta semana", 962, 14, 91, 4.6, 57250),
        _stats("Semana pasada", 902, 13, 90, 4.5, 53800),
        _stats("Hace 2 semanas", 875, 12, 89, 4.6, 52100),
        _stats("Hace 3 semanas", 925, 13, 92, 4.7, 55000),
    ],
    "month": [
        _stats("Este mes", 3850, 16, 90, 4.6, 230000),
        _stats("Mes pasado", 3650, 15, 89, 4.5, 218500),
        _stats("Hace 2 meses", 3450, 14, 88, 4.6, 205000),
        _stats("Hace 3 meses", 3720, 15, 91, 4.7, 222000),
    ],
}

SUPERADMIN_STATS = {
    "day": [
        _stats("Hoy", 645, 82, 93, 4.7, 38750, 950, 5),
        _stats("Ayer", 612, 79, 92, 4.6, 36950, 945, 5),
        _stats("Hace 2 días", 656, 84, 94, 4.8, 39250, 940, 5),
        _stats("Hace 3 días", 628, 80, 91, 4.5, 37600, 935, 5),
        _stats("Hace 4 días", 642, 83, 92, 4.7, 38400, 930, 5),
        _stats("Hace 5 días", 638, 82, 93, 4.6, 38200, 928, 5),
        _stats("Hace 6 días", 621, 78, 90, 4.5, 37100, 925, 5),
    ],
    "week": [
        _stats("Esta semana", 4442, 84, 92, 4.6, 267250, 950, 5),
        _stats("Semana pasada", 4302, 81, 91, 4.5, 258800, 920, 5),
        _stats("Hace 2 semanas", 4175, 79, 90, 4.6, 249100, 900, 5),
        _stats("Hace 3 semanas", 4225, 80, 92, 4.7, 253000, 880, 4),
    ],
    "month": [
        _stats("Este mes", 18350, 86, 91, 4.6, 1100000, 950, 5),
        _stats("Mes pasado", 17650, 84, 90, 4.5, 1055000, 880, 5),
        _stats("Hace 2 meses", 16450, 82, 89, 4.6, 985000, 850, 4),
        _stats("Hace 3 meses", 15720, 79, 90, 4.7, 942000, 820, 4),
    ],
}

REGION_STATS = [
    {"id": "reg_001", "name": "Capital", "active_drivers": 32, "rides": 245, "revenue": 14700},
    {"id": "reg_002", "name": "Norte", "active_drivers": 18, "rides": 156, "revenue": 9360},
    {"id": "reg_003", "name": "Sur", "active_drivers": 14, "rides": 124, "revenue": 7440},
    {"id": "reg_004", "name": "Este", "active_drivers": 11, "rides": 84, "revenue": 5040},
    {"id": "reg_005", "name": "Oeste", "active_drivers": 7, "rides": 36, "revenue": 2160},
]
