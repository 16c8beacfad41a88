USERS = [
    {
        "id": "5d7a514b-5d2c-4b9f-8b3e-000000000001",
        "name": "Admin Account",
        "email": "admin@gmail.com",
        "role": "admin",
        "password": "123456",
    },
    {
        "id": "5d7a514b-5d2c-4b9f-8b3e-000000000002",
        "name": "Publisher Account",
        "email": "publisher@gmail.com",
        "role": "publisher",
        "password": "123456",
    },
    {
        "id": "5d7a514b-5d2c-4b9f-8b3e-000000000003",
        "name": "User Account",
        "email": "user@gmail.com",
        "role": "user",
        "password": "123456",
    },
    {
        "id": "5d7a514b-5d2c-4b9f-8b3e-000000000004",
        "name": "Second Publisher",
        "email": "publisher2@gmail.com",
        "role": "publisher",
        "password": "123456",
    },
]

BOOTCAMPS = [
    {
        "id": "5d713995-b721-c3a1-4b2e-000000000001",
        "user_id": "5d7a514b-5d2c-4b9f-8b3e-000000000002",
        "name": "Devworks Bootcamp",
        "description": "Devworks is a full stack JavaScript Bootcamp located in the heart of Boston that focuses on the technologies you need to get a high paying job as a web developer",
        "website": "https://devworks.com",
        "phone": "(111) 111-1111",
        "email": "enroll@devworks.com",
        "address": "233 Bay State Rd Boston MA 02215",
        "latitude": 42.350846,
        "longitude": -71.103744,
        "formatted_address": "233 Bay State Rd, Boston, MA 02215, US",
        "street": "233 Bay State Rd",
        "city": "Boston",
        "state": "MA",
        "zipcode": "02215",
        "country": "US",
        "careers": ["Web Development", "UI/UX", "Business"],
        "housing": True,
        "job_assistance": True,
        "job_guarantee": False,
        "accept_gi": True,
    },
    {
        "id": "5d713995-b721-c3a1-4b2e-000000000002",
        "user_id": "5d7a514b-5d2c-4b9f-8b3e-000000000004",
        "name": "ModernTech Bootcamp",
        "description": "ModernTech has one goal, and that is to make you a rockstar developer and/or designer with a six figure salary",
        "website": "https://moderntech.com",
        "phone": "(222) 222-2222",
        "email": "enroll@moderntech.com",
        "address": "220 Pawtucket St, Lowell, MA 01854",
        "latitude": 42.646389,
        "longitude": -71.327606,
        "formatted_address": "220 Pawtucket St, Lowell, MA 01854, US",
        "street": "220 Pawtucket St",
        "city": "Lowell",
        "state": "MA",
        "zipcode": "01854",
        "country": "US",
        "careers": ["Web Development", "UI/UX", "Mobile Development"],
        "housing": False,
        "job_assistance": True,
        "job_guarantee": False,
        "accept_gi": True,
    },
    {
        "id": "5d713995-b721-c3a1-4b2e-000000000003",
        "user_id": "5d7a514b-5d2c-4b9f-8b3e-000000000001",
        "name": "Codemasters",
        "description": "Is coding your passion? Codemasters will give you the skills and the tools to become the best developer possible",
        "website": "https://codemasters.com",
        "phone": "(333) 333-3333",
        "email": "enroll@codemasters.com",
        "address": "85 South Prospect Street Burlington VT 05405",
        "latitude": 44.477839,
        "longitude": -73.196489,
        "formatted_address": "85 S Prospect St, Burlington, VT 05405, US",
        "street": "85 S Prospect St",
        "city": "Burlington",
        "state": "VT",
        "zipcode": "05405",
        "country": "US",
        "careers": ["Web Development", "Data Science", "Business"],
        "housing": False,
        "job_assistance": False,
        "job_guarantee": False,
        "accept_gi": False,
    },
]

COURSES = [
    {
        "id": "5d725a4a-7b29-2c4f-9e1a-000000000001",
        "bootcamp_id": "5d713995-b721-c3a1-4b2e-000000000001",
        "user_id": "5d7a514b-5d2c-4b9f-8b3e-000000000002",
        "title": "Front End Web Development",
        "description": "This course will provide you with all of the essentials to become a successful frontend web developer",
        "weeks": 8,
        "tuition": 8000,
        "minimum_skill": "beginner",
        "scholarship_available": True,
    },
    {
        "id": "5d725a4a-7b29-2c4f-9e1a-000000000002",
        "bootcamp_id": "5d713995-b721-c3a1-4b2e-000000000001",
        "user_id": "5d7a514b-5d2c-4b9f-8b3e-000000000002",
        "title": "Full Stack Web Development",
        "description": "In this course you will learn full stack web development, first learning all about the frontend and then the backend",
        "weeks": 12,
        "tuition": 10000,
        "minimum_skill": "intermediate",
        "scholarship_available": True,
    },
    {
        "id": "5d725a4a-7b29-2c4f-9e1a-000000000003",
        "bootcamp_id": "5d713995-b721-c3a1-4b2e-000000000002",
        "user_id": "5d7a514b-5d2c-4b9f-8b3e-000000000004",
        "title": "Web Design & Development",
        "description": "Get started building websites and web apps with HTML/CSS/JavaScript/PHP",
        "weeks": 10,
        "tuition": 12000,
        "minimum_skill": "beginner",
        "scholarship_available": False,
    },
    {
        "id": "5d725a4a-7b29-2c4f-9e1a-000000000004",
        "bootcamp_id": "5d713995-b721-c3a1-4b2e-000000000003",
        "user_id": "5d7a514b-5d2c-4b9f-8b3e-000000000001",
        "title": "Data Science Program",
        "description": "In this course you will learn Python for data science, machine learning and big data tools",
        "weeks": 10,
        "tuition": 12500,
        "minimum_skill": "intermediate",
        "scholarship_available": False,
    },
]

REVIEWS = [
    {
        "id": "5d7a514b-5d2c-4b9f-8b3e-0000000000a1",
        "bootcamp_id": "5d713995-b721-c3a1-4b2e-000000000001",
        "user_id": "5d7a514b-5d2c-4b9f-8b3e-000000000003",
        "title": "Learned a ton!",
        "text": "Lorem ipsum dolor sit amet, consectetur adipiscing elit.",
        "rating": 8,
    },
    {
        "id": "5d7a514b-5d2c-4b9f-8b3e-0000000000a2",
        "bootcamp_id": "5d713995-b721-c3a1-4b2e-000000000002",
        "user_id": "5d7a514b-5d2c-4b9f-8b3e-000000000003",
        "title": "Great bootcamp",
        "text": "Nunc pulvinar, tortor sed mollis mattis.",
        "rating": 10,
    },
]
